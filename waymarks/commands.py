"""
Command orchestration.
add_cities ties together country resolution -> country update ->
city lookup -> city merge in a single idempotent run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from waymarks.cities import Cities, match_cities
from waymarks.config import Settings
from waymarks.countries import Countries, CountryIndex, canonical_country_name
from waymarks.file_ops import ReferenceSource
from waymarks.models import (
    AddCitiesReport,
    CityOutcome,
    CityStatus,
    Coordinates,
    CountryInfo,
    Geoname,
)

logger = logging.getLogger(__name__)

Output = Callable[[str], None]


def _filename(url: str, default: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1] or default


async def get_country_info(settings: Settings, source: ReferenceSource, country: str) -> tuple[str, str]:
    """Resolve a country token to (iso, canonical name)."""
    url = settings.geonames.country_info_url
    output_path = settings.geonames.download_dir / _filename(url, "countryInfo.txt")
    await source.ensure(url, output_path)

    countries = source.decode(output_path, CountryInfo)
    index = CountryIndex.from_records(countries)
    logger.debug("Country index built with %d countries", len(index))

    iso, name = index.resolve(country)
    return iso, canonical_country_name(name)


async def update_country(
    settings: Settings,
    source: ReferenceSource,
    country: str,
    out: Output = print,
) -> tuple[str, str, bool]:
    """Resolve the country and make sure it is in the countries file."""
    iso, name = await get_country_info(settings, source, country)

    path = settings.docs.countries_path
    countries = Countries.load_or_new(path)

    added = countries.add(name)
    if added:
        countries.save(path)
        out(f"Added country: {name}")
    else:
        out(f"Country '{name}' already exists")
    return iso, name, added


async def get_cities(
    settings: Settings,
    source: ReferenceSource,
    names: list[str],
    country_iso: str,
) -> dict[str, Optional[Geoname]]:
    """Fetch the cities dump and look up the requested names in it."""
    url = settings.geonames.cities_url(country_iso)
    download_dir = settings.geonames.download_dir
    zip_path = download_dir / _filename(url, "cities.zip")

    await source.ensure(url, zip_path)
    await source.extract(zip_path, download_dir)

    records = source.decode(zip_path.with_suffix(".txt"), Geoname)
    return match_cities(records, country_iso, names)


async def add_cities(
    settings: Settings,
    country: str,
    names: list[str],
    source: Optional[ReferenceSource] = None,
    out: Output = print,
) -> AddCitiesReport:
    """
    Add the requested cities of `country` to the gazetteer.

    Steps:
      1. Resolve the country (name or ISO code) and record it in the
         countries file if it is new
      2. Look up the requested names in the GeoNames cities dump
      3. Merge found cities into the country's city file, never replacing
         an existing entry; the file is only written when something was added
    """
    source = source or ReferenceSource(timeout=settings.geonames.request_timeout)

    country_iso, country_name, country_added = await update_country(settings, source, country, out)
    report = AddCitiesReport(country=country_name, country_iso=country_iso, country_added=country_added)

    found = await get_cities(settings, source, names, country_iso)

    city_file: Path = settings.docs.city_file(country_name)
    cities = Cities.load_or_new(city_file)
    requested = {}
    for name in names:
        requested.setdefault(name.lower(), name)

    is_changed = False
    for key, city in found.items():
        if city is None:
            out(f"City '{requested[key]}' not found in country '{country_name}'")
            report.cities.append(CityOutcome(requested=requested[key], status=CityStatus.NOT_FOUND))
            continue

        coordinates = Coordinates(lat=city.latitude, lon=city.longitude)
        if cities.add(city.name, coordinates):
            is_changed = True
            status = CityStatus.ADDED
            out(f"Added city: {city.name} ({city.latitude}, {city.longitude})")
        else:
            status = CityStatus.EXISTS
            out(f"City '{city.name}' already exists in country '{country_name}'")
        report.cities.append(
            CityOutcome(requested=requested[key], status=status, name=city.name, coordinates=cities.get(city.name))
        )

    if is_changed:
        cities.save(city_file)
        logger.info("Saved %d cities to %s", len(cities), city_file)

    return report
