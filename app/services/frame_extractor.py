"""Extract a single JPEG frame from a video with ffmpeg.

ffmpeg runs as an asyncio subprocess and writes the encoded frame to its
stdout pipe (image2pipe / mjpeg); nothing touches the disk. The whole run is
bounded by a wall-clock timeout. Each call ends in exactly one of: the image
bytes, ProcessError, or FrameTimeoutError.
"""

import asyncio
import base64
import logging
from typing import List, Optional, Tuple

from app.core import config
from app.services.errors import FrameTimeoutError, ProcessError

logger = logging.getLogger(__name__)

SEEK_TIMESTAMP = "00:00:01.000"
READ_CHUNK_SIZE = 64 * 1024
STDERR_TAIL_CHARS = 2000
MIME_TYPE = "image/jpeg"

TIMEOUT_DETAILS = "The process took too long to complete"
EMPTY_OUTPUT_DETAILS = (
    f"No frame could be extracted at {SEEK_TIMESTAMP} "
    "(video may be shorter than the seek position)"
)


def build_ffmpeg_command(source: str, ffmpeg_path: str, max_width: int = 0) -> List[str]:
    cmd = [
        ffmpeg_path,
        "-hide_banner",
        "-loglevel", "error",
        "-nostdin",
        "-ss", SEEK_TIMESTAMP,
        "-i", source,
        "-frames:v", "1",
    ]
    if max_width > 0:
        # Never upscale; -2 keeps the height proportional and even for mjpeg.
        cmd += ["-vf", f"scale='min({max_width},iw)':-2"]
    cmd += [
        "-f", "image2pipe",
        "-vcodec", "mjpeg",
        "pipe:1",
    ]
    return cmd


async def _read_stdout(stream: asyncio.StreamReader) -> bytes:
    buffer = bytearray()
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
    return bytes(buffer)


async def _run(cmd: List[str]) -> Tuple[int, bytes, str]:
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessError(f"Could not start ffmpeg ({cmd[0]}): {e}")

    try:
        stdout, stderr = await asyncio.gather(
            _read_stdout(process.stdout),
            process.stderr.read(),
        )
        returncode = await process.wait()
    finally:
        if process.returncode is None:
            logger.warning(f"[FFMPEG] Killing ffmpeg (pid {process.pid})")
            process.kill()
            await process.wait()

    return returncode, stdout, stderr.decode("utf-8", errors="replace").strip()


async def extract_frame(
    source: str,
    ffmpeg_path: Optional[str] = None,
    timeout: Optional[float] = None,
    max_width: Optional[int] = None,
) -> bytes:
    """Seek to SEEK_TIMESTAMP in ``source`` and return one frame as JPEG bytes.

    ``source`` may be a local path or a URL ffmpeg can open. No retries.
    """
    ffmpeg_path = ffmpeg_path or config.FFMPEG_PATH
    timeout = config.EXTRACTION_TIMEOUT if timeout is None else timeout
    max_width = config.THUMBNAIL_MAX_WIDTH if max_width is None else max_width

    cmd = build_ffmpeg_command(source, ffmpeg_path, max_width)
    logger.info(f"[FFMPEG] Extracting frame at {SEEK_TIMESTAMP} from {source}")
    logger.debug(f"[FFMPEG] {' '.join(cmd)}")

    try:
        returncode, image, stderr = await asyncio.wait_for(_run(cmd), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"[FFMPEG] Timed out after {timeout:g}s on {source}")
        raise FrameTimeoutError(TIMEOUT_DETAILS)

    if returncode != 0:
        details = stderr[-STDERR_TAIL_CHARS:] or f"ffmpeg exited with code {returncode}"
        logger.error(f"[FFMPEG] Failed with code {returncode}: {details}")
        raise ProcessError(details)

    if not image:
        logger.error(f"[FFMPEG] No output for {source}")
        raise ProcessError(EMPTY_OUTPUT_DETAILS)

    logger.info(f"[FFMPEG] Extracted frame: {len(image):,} bytes")
    return image


def to_data_uri(image: bytes, mime_type: str = MIME_TYPE) -> str:
    encoded = base64.standard_b64encode(image).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
