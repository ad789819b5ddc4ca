"""
Shared fixtures: GeoNames sample rows, an in-memory reference source and
settings pointing at a temporary directory.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from waymarks.config import DocsConfig, GeoNamesConfig, Settings
from waymarks.models import CountryInfo, Geoname


COUNTRY_INFO_TXT = (
    "# GeoNames Country Info\n"
    "#ISO\tISO3\tISO-Numeric\tfips\tCountry\tCapital\tArea(in sq km)\tPopulation\tContinent\n"
    "AD\tAND\t020\tAN\tAndorra\tAndorra la Vella\t468\t77006\tEU\t.ad\tEUR\tEuro\t376\tAD###\t^(?:AD)*(\\d{3})$\tca\t3041565\tES,FR\t\n"
    "AE\tARE\t784\tAE\tUnited Arab Emirates\tAbu Dhabi\t82880\t9630959\tAS\t.ae\tAED\tDirham\t971\t##### #####\t^\\d{5}-\\d{5}$\tar-AE,fa,en,hi,ur\t290557\tSA,OM\t\n"
)

CITIES_TXT = (
    "3038832\tVila\tVila\tCasas Vila,Vila\t42.53176\t1.56654\tP\tPPL\tAD\t\t03\t\t\t\t1418\t\t1318\tEurope/Andorra\t2024-11-04\n"
    "3038999\tSoldeu\tSoldeu\tSol'deu,Soldeu,surudeu\t42.57688\t1.66769\tP\tPPL\tAD\t\t02\t\t\t\t602\t\t1832\tEurope/Andorra\t2017-11-06\n"
)


def country(iso: str, name: str) -> CountryInfo:
    return CountryInfo(iso=iso, iso3=iso + "X", iso_numeric="000", country=name)


def place(
    geonameid: int,
    name: str,
    lat: float,
    lon: float,
    country_code: str | None,
    asciiname: str | None = None,
) -> Geoname:
    return Geoname(
        geonameid=geonameid,
        name=name,
        asciiname=asciiname,
        latitude=lat,
        longitude=lon,
        feature_class="P",
        feature_code="PPL",
        country_code=country_code,
        modification_date=date(2024, 1, 1),
    )


COUNTRIES = [
    country("DE", "Germany"),
    country("FR", "France"),
    country("US", "United States"),
    country("CI", "Ivory Coast"),
]

PLACES = [
    place(2950159, "Berlin", 52.52, 13.405, "DE"),
    place(2867714, "München", 48.13743, 11.57549, "DE", asciiname="Muenchen"),
    place(2988507, "Paris", 48.85341, 2.3488, "FR"),
    place(4717560, "Paris", 33.66094, -95.55551, "US"),
    place(5128581, "New York City", 40.71427, -74.00597, "US"),
]


class FakeSource:
    """ReferenceSource stand-in serving fixed records and recording calls."""

    def __init__(self, countries=None, places=None, fail_on: str | None = None):
        self.records = {
            CountryInfo: list(COUNTRIES if countries is None else countries),
            Geoname: list(PLACES if places is None else places),
        }
        self.fail_on = fail_on
        self.ensured: list[tuple[str, Path]] = []
        self.extracted: list[tuple[Path, Path]] = []
        self.decoded: list[Path] = []

    async def ensure(self, url, path):
        if self.fail_on == "ensure":
            from waymarks.errors import AcquisitionError

            raise AcquisitionError(f"Failed to download {url}: HTTP 503")
        self.ensured.append((url, path))

    async def extract(self, archive_path, output_dir):
        self.extracted.append((archive_path, output_dir))

    def decode(self, path, model):
        self.decoded.append(path)
        return self.records[model]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        geonames=GeoNamesConfig(
            base_url="https://geonames.test/dump/",
            country_info_file="countryInfo.txt",
            cities_file="cities500.zip",
            download_dir=tmp_path / "geonames",
        ),
        docs=DocsConfig(dir=tmp_path / "docs", countries_file="countries.json", cities_folder="cities"),
    )


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def source_factory():
    """Build a FakeSource with custom records or a failing step."""
    return FakeSource


@pytest.fixture
def make_place():
    return place


@pytest.fixture
def places() -> list[Geoname]:
    return list(PLACES)


@pytest.fixture
def countries() -> list[CountryInfo]:
    return list(COUNTRIES)


@pytest.fixture
def country_info_txt() -> str:
    return COUNTRY_INFO_TXT


@pytest.fixture
def cities_txt() -> str:
    return CITIES_TXT
