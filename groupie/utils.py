"""Small parsing helpers shared by the store and the HTTP layer."""
from __future__ import annotations

import re
from typing import Optional

_INT_ID = re.compile(r"[+-]?[0-9]+")


def fold_name(name: str) -> str:
    return name.casefold()


def parse_id(raw: str) -> Optional[int]:
    """Parse a path segment as a base-10 integer id, or return None."""

    if not raw or not _INT_ID.fullmatch(raw):
        return None
    return int(raw)


def first_language_tag(header: str) -> str:
    """Primary language of the first entry of an Accept-Language header.

    ``"en-US,en;q=0.9"`` gives ``"en"``.
    """

    tag = header.split(",", 1)[0].strip()
    for separator in (";", "-"):
        index = tag.find(separator)
        if index > 0:
            tag = tag[:index].strip()
    return tag.lower()
