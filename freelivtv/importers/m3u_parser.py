"""M3U playlist parser following iptv-org conventions"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass
class M3UEntry:
    """Represents a single M3U playlist entry with all metadata"""

    duration: int | None = None  # None for live streams (-1)
    tvg_id: str | None = None
    tvg_name: str | None = None
    tvg_logo: str | None = None
    group_title: str | None = None
    url: str | None = None
    title: str | None = None
    extra_attrs: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        """Channel name: ``tvg-name`` when present, else the display title."""
        return self.tvg_name or self.title


class M3UParser:
    """Line-oriented M3U parser"""

    EXTINF_PATTERN = re.compile(r"#EXTINF:(-?\d+)")
    ATTR_PATTERN = re.compile(r'(\w+(?:-\w+)*)="([^"]*)"')
    URL_PATTERN = re.compile(r"^(https?|rtmp|rtsp|udp|tcp)://", re.IGNORECASE)

    @staticmethod
    def parse_extinf_line(line: str) -> M3UEntry:
        """
        Parse #EXTINF line

        Format: #EXTINF:-1 tvg-id="..." tvg-name="..." tvg-logo="..." group-title="..." ,Channel Name
        """
        entry = M3UEntry()

        duration_match = M3UParser.EXTINF_PATTERN.match(line)
        if duration_match:
            duration = int(duration_match.group(1))
            entry.duration = duration if duration > 0 else None

        for key, value in M3UParser.ATTR_PATTERN.findall(line):
            key_lower = key.lower()
            value = value.strip()
            if not value:
                continue
            if key_lower == "tvg-id":
                entry.tvg_id = value
            elif key_lower == "tvg-name":
                entry.tvg_name = value
            elif key_lower == "tvg-logo":
                entry.tvg_logo = value
            elif key_lower == "group-title":
                entry.group_title = value
            else:
                entry.extra_attrs[key] = value

        # Title follows the last comma once quoted attributes are removed,
        # so commas inside group-title do not split it.
        bare = M3UParser.ATTR_PATTERN.sub("", line)
        if "," in bare:
            title = bare.rsplit(",", 1)[1].strip()
            entry.title = title or None

        return entry

    @staticmethod
    def iter_entries(text: str) -> Iterator[M3UEntry]:
        """
        Yield complete entries (metadata + URL) in playlist order.

        The first non-comment line after an #EXTINF closes it. If that line is
        not a URL the pending entry is dropped, so a metadata line never
        borrows a URL from further down the file.
        """
        pending: M3UEntry | None = None

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            if line.startswith("#EXTINF"):
                pending = M3UParser.parse_extinf_line(line)
                continue

            if line.startswith("#"):
                continue

            if pending is not None and M3UParser.URL_PATTERN.match(line):
                pending.url = line
                yield pending
            pending = None

    @staticmethod
    def parse_text(text: str) -> list[M3UEntry]:
        """Parse a whole playlist into a list of entries"""
        entries = list(M3UParser.iter_entries(text))
        logger.debug(f"[M3U] Parsed {len(entries)} entries")
        return entries
