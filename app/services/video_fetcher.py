"""Download a remote video into a request-scoped temporary file.

``fetch_video`` is an async context manager: the temp file exists only
inside the ``async with`` block and is removed on every way out of it,
including download failures, extraction errors, timeouts and cancellation.
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from app.core import config
from app.services.errors import DownloadError
from app.services.filenames import extension_from_url

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
MAX_REDIRECTS = 5
TEMP_PREFIX = "thumbnail-"
SUPPORTED_SCHEMES = ("http", "https")


class FetchedVideo:
    """A downloaded video on local disk, owned by a single request."""

    def __init__(self, local_path: str, size: int = 0, content_type: str = ""):
        self.local_path = local_path
        self.size = size
        self.content_type = content_type
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            os.remove(self.local_path)
            logger.debug(f"[FETCH] Removed temp file {self.local_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            # Cleanup failures are logged, never raised.
            logger.warning(f"[FETCH] Could not remove temp file {self.local_path}: {e}")


def _create_transport() -> httpx.AsyncBaseTransport:
    return httpx.AsyncHTTPTransport(retries=0)


def _create_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        transport=_create_transport(),
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
    )


async def _download(
    client: httpx.AsyncClient, video_url: str, video: FetchedVideo, max_bytes: int
) -> None:
    async with client.stream("GET", video_url) as response:
        if not response.is_success:
            raise DownloadError(
                f"HTTP {response.status_code} {response.reason_phrase} while fetching {video_url}"
            )

        video.content_type = response.headers.get("content-type", "")
        with open(video.local_path, "wb") as f:
            async for chunk in response.aiter_bytes(CHUNK_SIZE):
                video.size += len(chunk)
                if max_bytes and video.size > max_bytes:
                    raise DownloadError(
                        f"Video exceeds the maximum download size of {max_bytes:,} bytes"
                    )
                f.write(chunk)


async def _fetch_into(video: FetchedVideo, video_url: str, timeout: float, max_bytes: int) -> None:
    logger.info(f"[FETCH] Downloading {video_url} to {video.local_path}")
    try:
        async with _create_client(timeout) as client:
            await _download(client, video_url, video, max_bytes)
    except httpx.TooManyRedirects:
        logger.warning(f"[FETCH] Too many redirects for {video_url}")
        raise DownloadError(f"Too many redirects (more than {MAX_REDIRECTS}) for {video_url}")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"[FETCH] Transport error for {video_url}: {e!r}")
        raise DownloadError(f"{type(e).__name__}: {e}")
    except DownloadError as e:
        logger.warning(f"[FETCH] Download failed for {video_url}: {e.details}")
        raise

    logger.info(f"[FETCH] Downloaded {video.size:,} bytes ({video.content_type or 'unknown type'})")


@asynccontextmanager
async def fetch_video(
    video_url: str,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> AsyncIterator[FetchedVideo]:
    """Stream ``video_url`` to a temp file and yield it as a ``FetchedVideo``.

    Raises DownloadError for unsupported schemes, transport failures,
    non-2xx statuses and oversized bodies; the temp file is gone by then.
    """
    timeout = config.DOWNLOAD_TIMEOUT if timeout is None else timeout
    max_bytes = config.MAX_DOWNLOAD_BYTES if max_bytes is None else max_bytes

    scheme = video_url.split(":", 1)[0].lower() if ":" in video_url else ""
    if scheme not in SUPPORTED_SCHEMES:
        raise DownloadError(f"Unsupported URL scheme for {video_url}; expected http or https")

    fd, local_path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=extension_from_url(video_url))
    os.close(fd)
    video = FetchedVideo(local_path)

    try:
        await _fetch_into(video, video_url, timeout, max_bytes)
        yield video
    finally:
        video.release()
