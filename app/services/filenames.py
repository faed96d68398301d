import posixpath
from urllib.parse import urlsplit

FALLBACK_FILENAME = "thumbnail"


def filename_from_url(video_url: str) -> str:
    """Derive a display name from the last path segment, minus its extension.

    The segment is used as it appears in the URL, percent-encoding included
    (``my%20clip.mp4`` gives ``my%20clip``).
    """
    try:
        parsed = urlsplit(video_url)
        if not parsed.scheme or not parsed.netloc:
            return FALLBACK_FILENAME
        basename = posixpath.basename(parsed.path)
    except (ValueError, TypeError, AttributeError):
        return FALLBACK_FILENAME

    stem, _ = posixpath.splitext(basename)
    return stem or FALLBACK_FILENAME


def extension_from_url(video_url: str) -> str:
    try:
        path = urlsplit(video_url).path
    except (ValueError, TypeError, AttributeError):
        return ""
    _, ext = posixpath.splitext(posixpath.basename(path))
    if len(ext) > 6 or not ext[1:].isalnum():
        return ""
    return ext.lower()
