"""
Pydantic models used across the pipeline for validation and serialization.
These are pure data objects with no file or network coupling.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ── Enums ──────────────────────────────────────────────────────────────

class FeatureClass(str, Enum):
    A = "A"  # country, state, region,...
    H = "H"  # stream, lake, ...
    L = "L"  # parks, area, ...
    P = "P"  # city, village,...
    R = "R"  # road, railroad
    S = "S"  # spot, building, farm
    T = "T"  # mountain, hill, rock,...
    U = "U"  # undersea
    V = "V"  # forest, heath,...


class CityStatus(str, Enum):
    ADDED = "added"
    EXISTS = "exists"
    NOT_FOUND = "not_found"


# ── GeoNames reference rows ───────────────────────────────────────────

class _TsvRecord(BaseModel):
    """Base for rows read from GeoNames dumps. Empty cells become None."""

    model_config = {"frozen": True}

    @field_validator("*", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v


class CountryInfo(_TsvRecord):
    """A row of countryInfo.txt. Only the leading columns are modelled."""
    iso: str
    iso3: str
    iso_numeric: str
    fips: Optional[str] = None
    country: str


class Geoname(_TsvRecord):
    """A row of a GeoNames place dump (cities500.txt, DE.txt, ...)."""
    geonameid: int
    name: str
    asciiname: Optional[str] = None
    alternatenames: Optional[str] = None
    latitude: float
    longitude: float
    feature_class: Optional[FeatureClass] = None
    feature_code: Optional[str] = None
    country_code: Optional[str] = None
    cc2: Optional[str] = None
    admin1_code: Optional[str] = None
    admin2_code: Optional[str] = None
    admin3_code: Optional[str] = None
    admin4_code: Optional[str] = None
    population: Optional[float] = None
    elevation: Optional[int] = None
    dem: Optional[float] = None
    timezone: Optional[str] = None
    modification_date: date


# ── Gazetteer models ──────────────────────────────────────────────────

class Coordinates(BaseModel):
    lat: float
    lon: float


class CityOutcome(BaseModel):
    """What happened to one requested city."""
    requested: str
    status: CityStatus
    name: Optional[str] = Field(None, description="Dataset name when the city was found")
    coordinates: Optional[Coordinates] = None


class AddCitiesReport(BaseModel):
    country: str
    country_iso: str
    country_added: bool = False
    cities: list[CityOutcome] = Field(default_factory=list)

    @property
    def cities_added(self) -> int:
        return sum(1 for c in self.cities if c.status == CityStatus.ADDED)
