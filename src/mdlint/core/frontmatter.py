"""YAML front matter detection."""
from dataclasses import dataclass
from typing import Any, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

OPENING = "---"
CLOSINGS = ("---", "...")


@dataclass(frozen=True)
class FrontMatter:
    """Front matter found at the top of a document."""
    end_line: int                       # 1-based line of the closing marker
    data: Optional[dict[str, Any]]      # None when the YAML is unusable


def split_front_matter(lines: list[str]) -> Optional[FrontMatter]:
    """
    Find a YAML front matter block at the top of a document.

    The block must open on the first line with ``---`` and close with
    ``---`` or ``...``. Unparseable YAML still counts as front matter so the
    lines are not linted as markdown, but ``data`` is None.

    Returns:
        FrontMatter, or None if the document has no front matter
    """
    if not lines or lines[0].rstrip() != OPENING:
        return None

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() in CLOSINGS:
            break
    else:
        return None

    raw = "\n".join(lines[1:idx])
    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring malformed front matter: {e}")
        return FrontMatter(end_line=idx + 1, data=None)

    if not isinstance(data, dict):
        logger.debug("Front matter is not a mapping, ignoring its contents")
        data = None

    return FrontMatter(end_line=idx + 1, data=data)
