"""Failure taxonomy for thumbnail generation.

Every error carries a short human-readable summary (``error``) and the
underlying cause (``details``); ``to_dict`` is the JSON body the API returns.
"""

from typing import Dict


class ThumbnailError(Exception):
    error = "Thumbnail generation failed"

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details

    def to_dict(self) -> Dict:
        return {
            "success": False,
            "error": self.error,
            "details": self.details,
        }


class DownloadError(ThumbnailError):
    error = "Failed to download video"


class ProcessError(ThumbnailError):
    error = "Failed to generate thumbnail"


class FrameTimeoutError(ThumbnailError):
    error = "Thumbnail generation timeout"
