"""Fetch a remote video and turn its frame at 1s into a base64 JPEG thumbnail.

Download first, then extract from the local copy: network flakiness stays
in the fetcher and ffmpeg only ever reads stable bytes from disk. One
wall-clock budget covers both steps.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from app.core import config
from app.services.errors import FrameTimeoutError
from app.services.filenames import filename_from_url
from app.services.frame_extractor import TIMEOUT_DETAILS, extract_frame, to_data_uri
from app.services.video_fetcher import fetch_video

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thumbnail generated successfully"
MIN_EXTRACTION_BUDGET = 0.001


async def _fetch_and_extract(video_url: str, deadline: float) -> bytes:
    async with fetch_video(video_url) as video:
        # Extraction gets whatever the download left of the overall budget.
        remaining = max(deadline - time.monotonic(), MIN_EXTRACTION_BUDGET)
        return await extract_frame(video.local_path, timeout=remaining)


async def generate_thumbnail(video_url: str, timeout: Optional[float] = None) -> Dict:
    """Return the success payload for ``video_url``.

    ``timeout`` (default EXTRACTION_TIMEOUT) bounds download and extraction
    together. Raises DownloadError, ProcessError or FrameTimeoutError; the
    temp file is always removed before this returns or raises.
    """
    timeout = config.EXTRACTION_TIMEOUT if timeout is None else timeout
    filename = filename_from_url(video_url)
    logger.info(f"[THUMBNAIL] Request for {video_url} (filename: {filename})")
    started = time.monotonic()

    try:
        image = await asyncio.wait_for(
            _fetch_and_extract(video_url, started + timeout), timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.error(f"[THUMBNAIL] Timed out after {timeout:g}s for {video_url}")
        raise FrameTimeoutError(TIMEOUT_DETAILS)

    logger.info(
        f"[THUMBNAIL] Done for {filename} in {time.monotonic() - started:.2f}s "
        f"({len(image):,} bytes)"
    )
    return {
        "success": True,
        "filename": filename,
        "base64": to_data_uri(image),
        "message": SUCCESS_MESSAGE,
    }
