"""
Central configuration loaded from environment variables with sensible defaults.
Paths are relative to the working directory unless given as absolute paths.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True)
class GeoNamesConfig:
    base_url: str = os.getenv("GEONAMES_BASE_URL", "https://download.geonames.org/export/dump/")
    country_info_file: str = os.getenv("GEONAMES_COUNTRY_INFO_FILE", "countryInfo.txt")
    # May contain "{country}" to use the per-country dumps (e.g. "{country}.zip")
    cities_file: str = os.getenv("GEONAMES_CITIES_FILE", "cities500.zip")
    download_dir: Path = Path(os.getenv("GEONAMES_DOWNLOAD_DIR", "data/geonames"))
    request_timeout: float = float(os.getenv("GEONAMES_TIMEOUT", "60"))

    @property
    def country_info_url(self) -> str:
        return f"{self.base_url}{self.country_info_file}"

    def cities_url(self, country_iso: str) -> str:
        return f"{self.base_url}{self.cities_file.format(country=country_iso.upper())}"


@dataclass(frozen=True)
class DocsConfig:
    dir: Path = Path(os.getenv("DOCS_DIR", "docs"))
    countries_file: str = os.getenv("DOCS_COUNTRIES_FILE", "countries.json")
    cities_folder: str = os.getenv("DOCS_CITIES_FOLDER", "cities")

    @property
    def countries_path(self) -> Path:
        return self.dir / self.countries_file

    @property
    def cities_dir(self) -> Path:
        return self.dir / self.cities_folder

    def city_file(self, country_name: str) -> Path:
        """Per-country city file, named after the canonical country name."""
        return self.cities_dir / f"{country_name}.json"


@dataclass(frozen=True)
class Settings:
    geonames: GeoNamesConfig = field(default_factory=GeoNamesConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
