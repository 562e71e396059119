"""
Slug helpers shared by articles, categories and static pages
"""

import re
import unicodedata

SLUG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"
_SLUG_RE = re.compile(SLUG_PATTERN)


def slugify(text: str) -> str:
    """Create a URL-safe slug from a title.

    Accented letters are folded to ASCII first ("Éducation" -> "education").
    Returns an empty string when nothing usable is left (e.g. Arabic titles).
    """
    folded = unicodedata.normalize("NFKD", text or "")
    folded = folded.encode("ascii", "ignore").decode("ascii")
    s = folded.lower()
    return re.sub(r"[^a-z0-9]+", "-", s).strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(_SLUG_RE.match(value or ""))
