"""
Photos CDN — HTTP routes.

Every path that is not ``/health`` is an original photo key.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from photos_cdn import controller, responses
from photos_cdn.service import ResizeContext

router = APIRouter(tags=["photos"])


def get_context(request: Request) -> ResizeContext:
    return request.app.state.resize_context


@router.get(
    "/{image_path:path}",
    summary="Redirect to a photo variant",
    description=(
        "Redirects to the original (f=raw) or to a resized WebP variant "
        "(f=thumb|placeholder|scaled, w=width, q=quality 1-10), "
        "transcoding and storing the variant on first request."
    ),
    responses={
        301: {"description": "Redirect to the original or the resized variant"},
        400: {"description": "Invalid variant, width or quality"},
        404: {"description": "Original not found"},
    },
)
def get_image(
    image_path: str,
    request: Request,
    ctx: ResizeContext = Depends(get_context),
) -> Response:
    result = controller.handle(f"/{image_path}", request.url.query, ctx)
    return responses.to_response(result)
