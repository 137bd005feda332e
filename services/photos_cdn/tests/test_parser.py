import pytest

from photos_cdn.constants import Variant
from photos_cdn.exceptions import InvalidPath, InvalidQuality, InvalidVariant, InvalidWidth
from photos_cdn.parser import parse_request


def test_defaults() -> None:
    request = parse_request("/2023-12-10/1000013814-01.jpeg")
    assert request.original_path == "2023-12-10/1000013814-01.jpeg"
    assert request.variant is Variant.RAW
    assert request.requested_width == 250
    assert request.requested_quality == 6


def test_thumb_with_width_and_quality() -> None:
    request = parse_request("/2023-12-10/1000013814-01.jpeg", "f=thumb&w=500&q=8")
    assert request.variant is Variant.THUMB
    assert request.requested_width == 500
    assert request.requested_quality == 8


def test_scaled_uses_default_width_and_quality() -> None:
    request = parse_request("/x.jpeg", "f=scaled")
    assert (request.requested_width, request.requested_quality) == (250, 6)


def test_out_of_range_quality_is_left_for_resolution() -> None:
    assert parse_request("/x.jpeg", "f=thumb&q=42").requested_quality == 42


@pytest.mark.parametrize("value", ["bogus", "", "RAW", "thumbnail"])
def test_unknown_variant_is_rejected(value: str) -> None:
    with pytest.raises(InvalidVariant) as exc_info:
        parse_request("/x.jpeg", f"f={value}")
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == f"Invalid size: {value}!"


def test_variant_is_checked_before_the_path() -> None:
    with pytest.raises(InvalidVariant):
        parse_request("/", "f=bogus")


@pytest.mark.parametrize("path", ["/", "", "/2023-12-10/"])
def test_empty_or_directory_path_is_rejected(path: str) -> None:
    with pytest.raises(InvalidPath):
        parse_request(path)


@pytest.mark.parametrize("query", ["f=raw&w=abc&q=zzz", "f=placeholder&w=-5&q=nope"])
def test_width_and_quality_are_ignored_for_raw_and_placeholder(query: str) -> None:
    request = parse_request("/x.jpeg", query)
    assert request.requested_width == 250
    assert request.requested_quality == 6


@pytest.mark.parametrize("value", ["abc", "-1", "12.5", ""])
def test_invalid_width_is_rejected(value: str) -> None:
    with pytest.raises(InvalidWidth) as exc_info:
        parse_request("/x.jpeg", f"f=thumb&w={value}")
    assert exc_info.value.detail == f"Invalid width: {value}!"


def test_invalid_quality_is_rejected() -> None:
    with pytest.raises(InvalidQuality) as exc_info:
        parse_request("/x.jpeg", "f=scaled&q=high")
    assert exc_info.value.detail == "Invalid quality: high!"


def test_first_value_wins_for_repeated_parameters() -> None:
    assert parse_request("/x.jpeg", "f=thumb&f=scaled").variant is Variant.THUMB
