"""M3U generation service — builds live playlists from provider data."""
from __future__ import annotations

import re
import time
from typing import Optional

from app.models.xtream import Credentials, LiveStream
from app.services.category_service import UNKNOWN_CATEGORY

M3U_HEADER = "#EXTM3U"

_UNSAFE_CHARS = re.compile(r"[,\n\r]")


def sanitize(value: str) -> str:
    """Replace commas and line breaks with spaces, then trim."""
    return _UNSAFE_CHARS.sub(" ", value).strip()


def display_name(stream: LiveStream) -> str:
    return stream.name or f"Channel {stream.stream_id}"


def stream_url(creds: Credentials, stream: LiveStream, extension: str = "ts") -> str:
    return f"{creds.url}/live/{creds.username}/{creds.password}/{stream.stream_id}.{extension}"


def extinf_line(stream: LiveStream, name: str, group: str) -> str:
    return (
        f'#EXTINF:-1 tvg-id="{stream.epg_channel_id}" tvg-name="{name}" '
        f'tvg-logo="{stream.stream_icon}" group-title="{group}",{name}'
    )


def playlist_filename(prefix: str = "xtream_playlist", now: Optional[float] = None) -> str:
    """Attachment filename carrying the current unix time in milliseconds."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{prefix}_{millis}.m3u"


class M3uService:
    """Serializes live streams to an extended M3U document."""

    def __init__(self, extension: str = "ts"):
        self.extension = extension

    def generate_m3u(
        self,
        creds: Credentials,
        streams: list[LiveStream],
        cat_map: dict[str, str],
    ) -> str:
        """Build the playlist; one #EXTINF/URL pair per stream, in order."""
        lines = [M3U_HEADER]
        for stream in streams:
            name = sanitize(display_name(stream))
            group = sanitize(cat_map.get(stream.category_id or "") or UNKNOWN_CATEGORY)
            lines.append(extinf_line(stream, name, group))
            lines.append(stream_url(creds, stream, self.extension))
        return "\n".join(lines) + "\n"
