from fastapi.testclient import TestClient

from conftest import ORIGINAL


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "photos-cdn"


def test_thumb_redirect(client: TestClient, resized) -> None:
    response = client.get(f"/{ORIGINAL}?f=thumb&w=500&q=8", follow_redirects=False)
    assert response.status_code == 301
    assert response.headers["location"] == (
        "https://resized-photos.s3.eu-central-1.amazonaws.com/2023-12-10/1000013814-01.thumb-500-8.webp"
    )
    assert response.headers["cache-control"] == "public, max-age=31449600, immutable"
    assert "x-request-id" in response.headers
    assert len(resized.stored) == 1


def test_raw_redirect(client: TestClient, photos) -> None:
    response = client.get(f"/{ORIGINAL}", follow_redirects=False)
    assert response.status_code == 301
    assert response.headers["location"].startswith("https://s3.eu-central-1.amazonaws.com/photos.example.com/")
    assert photos.calls == []


def test_bad_request_is_plain_text(client: TestClient) -> None:
    response = client.get("/x.jpeg?f=bogus", follow_redirects=False)
    assert response.status_code == 400
    assert response.text == "Invalid size: bogus!"
    assert response.headers["content-type"].startswith("text/plain")


def test_not_found(client: TestClient) -> None:
    response = client.get("/missing.jpeg?f=scaled&w=250", follow_redirects=False)
    assert response.status_code == 404
    assert response.content == b""
    assert response.headers["cache-control"] == "public, max-age=31449600, immutable"


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get(f"/{ORIGINAL}", headers={"X-Request-ID": "abc-123"}, follow_redirects=False)
    assert response.headers["x-request-id"] == "abc-123"


def test_unhandled_errors_are_plain_500(settings, ctx, resized) -> None:
    from photos_cdn.main import create_app

    resized.fail_with = RuntimeError("boom")
    with TestClient(create_app(settings, ctx), raise_server_exceptions=False) as c:
        response = c.get(f"/{ORIGINAL}?f=thumb", follow_redirects=False)
    assert response.status_code == 500
    assert response.text == "Internal error."
    assert response.headers["cache-control"] == "no-store"
