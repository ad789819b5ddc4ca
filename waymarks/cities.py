"""
City matching against GeoNames place records, and the per-country city file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from pydantic import TypeAdapter

from waymarks.jsonstore import load_json, save_json
from waymarks.models import Coordinates, Geoname

logger = logging.getLogger(__name__)

_CITY_MAP = TypeAdapter(dict[str, Coordinates])


def match_cities(
    records: Iterable[Geoname],
    country_iso: str,
    names: Iterable[str],
) -> dict[str, Optional[Geoname]]:
    """
    Resolve requested city names to place records of one country.

    The result is keyed by the lowercased requested name, in order of first
    appearance; duplicates share one slot. A record matches on its name or
    its ASCII name (case-insensitive) and fills at most one slot. The first
    record in dataset order wins a slot. Scanning stops once every slot is
    filled; slots with no match stay None.
    """
    result: dict[str, Optional[Geoname]] = {}
    for name in names:
        result.setdefault(name.lower(), None)

    outstanding = set(result)
    country_iso = country_iso.lower()

    if not outstanding:
        return result

    for record in records:
        if record.country_code is None or record.country_code.lower() != country_iso:
            continue

        keys = [record.name.lower()]
        if record.asciiname:
            keys.append(record.asciiname.lower())

        for key in keys:
            if key in outstanding:
                result[key] = record
                outstanding.discard(key)
                break

        if not outstanding:
            break

    logger.debug("Matched %d/%d requested cities in %s",
                 len(result) - len(outstanding), len(result), country_iso.upper())
    return result


class Cities:
    def __init__(self, cities: Optional[dict[str, Coordinates]] = None) -> None:
        self.cities: dict[str, Coordinates] = dict(cities or {})

    def add(self, name: str, coordinates: Coordinates) -> bool:
        """Insert a city; an existing entry is never overwritten."""
        if name in self.cities:
            return False
        self.cities[name] = coordinates
        return True

    def get(self, name: str) -> Optional[Coordinates]:
        return self.cities.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.cities

    def __len__(self) -> int:
        return len(self.cities)

    @classmethod
    def load(cls, path: Path) -> Cities:
        return cls(load_json(path, _CITY_MAP))

    @classmethod
    def load_or_new(cls, path: Path) -> Cities:
        try:
            return cls.load(path)
        except FileNotFoundError:
            logger.info("No city file at %s yet, starting empty", path)
            return cls()

    def save(self, path: Path) -> None:
        save_json(path, {name: coords.model_dump() for name, coords in self.cities.items()})
