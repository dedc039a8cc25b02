"""
YouTube URL handling.
"""

import re

_VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"
)


def extract_video_id(url: str) -> str | None:
    """
    Pull the video id out of a watch, short (youtu.be) or embed URL.

    Returns None when the URL matches none of those forms.
    """
    match = _VIDEO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def watch_url(video_id: str) -> str:
    """Canonical watch URL for a video id."""
    return f"https://www.youtube.com/watch?v={video_id}"
