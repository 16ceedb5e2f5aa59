"""
URL slug derivation for tournament titles.
Pure function of the title; the slug is the tournament's primary key and URL segment.
"""
from __future__ import annotations

import re

from slugify import slugify as _transliterate_slug

# Characters dropped outright before transliteration
_REMOVE = re.compile(r"[*+~.()'\"!:@/]")


def slugify(title: str) -> str:
    """
    Lower-case ASCII slug: "Chess Club: Spring!" -> "chess-club-spring",
    "Café Cup" -> "cafe-cup". Returns "" when nothing usable is left.
    """
    return _transliterate_slug(_REMOVE.sub("", title), lowercase=True)


def tournament_url(slug: str) -> str:
    return "/tournaments/" + slug
