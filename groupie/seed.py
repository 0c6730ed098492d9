"""
Seed data for the artist store.

The store is filled once at start-up from a JSON array of artists. When the
file is missing, unreadable or empty, the two records below are used instead.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from .models import Artist, InvalidPayload
from .store import ArtistStore

logger = logging.getLogger(__name__)

FALLBACK_ARTISTS = (
    Artist(
        id=1,
        image="",
        name="Queen",
        members=["Freddie Mercury", "Brian May", "John Deacon", "Roger Taylor"],
        creation_date=1970,
        first_album="Queen",
        locations="London, UK",
        concert_dates="1973-07-13",
        relations="none",
    ),
    Artist(
        id=2,
        image="",
        name="Linkin Park",
        members=[
            "Chester Bennington",
            "Mike Shinoda",
            "Brad Delson",
            "Dave Farrell",
            "Rob Bourdon",
            "Joe Hahn",
        ],
        creation_date=1996,
        first_album="Hybrid Theory",
        locations="Agoura Hills, California, USA",
        concert_dates="2000-10-24",
        relations="nu metal",
    ),
)


def fallback_artists() -> List[Artist]:
    """
    Return fresh copies of the hardcoded seed records.

    Returns:
        list: Artist records Queen (id 1) and Linkin Park (id 2)
    """
    return [artist.copy() for artist in FALLBACK_ARTISTS]


def load_artists_file(path: Union[str, Path]) -> Optional[List[Artist]]:
    """
    Read a JSON array of artists.

    Args:
        path: Location of the seed file

    Returns:
        list or None: The parsed artists, or None when the file cannot be used
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read artists from %s: %s", path, exc)
        return None
    if not isinstance(data, list):
        logger.warning("Artists file %s does not contain a JSON array", path)
        return None
    try:
        return [Artist.from_payload(item) for item in data]
    except InvalidPayload as exc:
        logger.warning("Invalid artist record in %s: %s", path, exc)
        return None


def load_seed(path: Optional[Union[str, Path]]) -> List[Artist]:
    artists = load_artists_file(path) if path else None
    if artists:
        logger.info("Loaded %d artists from %s", len(artists), path)
        return artists
    logger.info("Using built-in seed artists")
    return fallback_artists()


def build_store(path: Optional[Union[str, Path]]) -> ArtistStore:
    return ArtistStore(load_seed(path))
