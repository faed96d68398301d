import os

import imageio_ffmpeg


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got: {raw}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got: {raw}")
    return value


HOST = os.getenv("HOST") or "0.0.0.0"
PORT = _int_env("PORT", 3000)

LOG_LEVEL_STR = os.getenv("LOG_LEVEL") or "INFO"

FFMPEG_PATH = os.getenv("FFMPEG_PATH") or imageio_ffmpeg.get_ffmpeg_exe()

EXTRACTION_TIMEOUT = _float_env("EXTRACTION_TIMEOUT", 25.0)
DOWNLOAD_TIMEOUT = _float_env("DOWNLOAD_TIMEOUT", 30.0)
MAX_DOWNLOAD_BYTES = _int_env("MAX_DOWNLOAD_BYTES", 500 * 1024 * 1024)
THUMBNAIL_MAX_WIDTH = _int_env("THUMBNAIL_MAX_WIDTH", 320)
