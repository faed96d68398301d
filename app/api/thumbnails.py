"""Synchronous thumbnail endpoint: the frame is extracted within the request.

Domain failures are returned as structured JSON bodies rather than
HTTPException details, so clients always see ``success``/``error``/``details``.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.schemas.thumbnails import ThumbnailErrorResponse, ThumbnailRequest, ThumbnailResponse
from app.services.errors import ThumbnailError
from app.services.thumbnail_generator import generate_thumbnail

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["thumbnails"],
)

MISSING_URL_ERROR = "Video URL is required"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def missing_url_response() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": MISSING_URL_ERROR},
    )


async def read_thumbnail_request(request: Request) -> ThumbnailRequest:
    """Accept ``videoUrl`` from a JSON body or an HTML form post.

    An absent, malformed or mistyped body yields an empty request, which
    the endpoint answers with 400.
    """
    content_type = request.headers.get("content-type", "").lower()
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return ThumbnailRequest.model_validate(dict(form))

        body = await request.body()
        if not body.strip():
            return ThumbnailRequest()
        return ThumbnailRequest.model_validate_json(body)
    except ValidationError as e:
        logger.info(f"Rejected thumbnail request body: {e.errors()}")
        return ThumbnailRequest()


@router.get("/thumbnail", status_code=405)
def thumbnail_usage():
    return JSONResponse(
        status_code=405,
        content={
            "success": False,
            "error": "Method Not Allowed",
            "message": "Only POST method is allowed with videoUrl in JSON body.",
            "usage": {
                "method": "POST",
                "url": "/api/thumbnail",
                "body": {"videoUrl": "https://example.com/video.mp4"},
            },
        },
    )


@router.post(
    "/thumbnail",
    response_model=ThumbnailResponse,
    responses={400: {"model": ThumbnailErrorResponse}, 500: {"model": ThumbnailErrorResponse}},
)
async def create_thumbnail(request: ThumbnailRequest = Depends(read_thumbnail_request)):
    """Extract the frame at 1s from ``videoUrl`` and return it as a JPEG data URI."""
    video_url = (request.video_url or "").strip()
    if not video_url:
        return missing_url_response()

    try:
        return await generate_thumbnail(video_url)
    except ThumbnailError as e:
        logger.error(f"Thumbnail failed for {video_url}: {e.error}: {e.details}")
        return JSONResponse(status_code=500, content=e.to_dict())
