"""
Country lookup and the persisted set of curated countries.

CountryIndex resolves a user token that is either an ISO alpha-2 code or a
country name (any case) to the dataset's (iso, name) pair. Countries is the
sorted set of canonical names stored in the countries JSON file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter

from waymarks.errors import UnresolvedCountry
from waymarks.jsonstore import load_json, save_json
from waymarks.models import CountryInfo

logger = logging.getLogger(__name__)

_COUNTRY_LIST = TypeAdapter(list[str])


class CountryIndex:
    def __init__(self) -> None:
        self.name_to_iso: dict[str, str] = {}
        self.iso_to_name: dict[str, str] = {}
        self._display: dict[str, str] = {}

    @classmethod
    def from_records(cls, records: Iterable[CountryInfo]) -> CountryIndex:
        index = cls()
        for record in records:
            index.add_country(record.country, record.iso)
        return index

    def add_country(self, name: str, iso: str) -> None:
        name_key = name.lower()
        iso = iso.lower()
        self.name_to_iso[name_key] = iso
        self.iso_to_name[iso] = name_key
        self._display[name_key] = name

    def resolve(self, token: str) -> tuple[str, str]:
        """
        Return (lowercase iso, dataset country name) for an ISO code or a
        country name. Codes are checked before names.
        """
        key = token.strip().lower()
        if key in self.iso_to_name:
            return key, self._display[self.iso_to_name[key]]
        if key in self.name_to_iso:
            return self.name_to_iso[key], self._display[key]
        raise UnresolvedCountry(token)

    def __len__(self) -> int:
        return len(self.iso_to_name)


def canonical_country_name(name: str) -> str:
    """Storage form of a country name: spaces become underscores."""
    return name.replace(" ", "_")


class Countries:
    def __init__(self, countries: Iterable[str] = ()) -> None:
        self.countries: set[str] = set(countries)

    def add(self, country: str) -> bool:
        if country in self.countries:
            return False
        self.countries.add(country)
        return True

    def __contains__(self, country: str) -> bool:
        return country in self.countries

    def __len__(self) -> int:
        return len(self.countries)

    @classmethod
    def load(cls, path: Path) -> Countries:
        return cls(load_json(path, _COUNTRY_LIST))

    @classmethod
    def load_or_new(cls, path: Path) -> Countries:
        try:
            return cls.load(path)
        except FileNotFoundError:
            logger.info("No countries file at %s yet, starting empty", path)
            return cls()

    def save(self, path: Path) -> None:
        save_json(path, sorted(self.countries))
