"""
Acquisition of the GeoNames reference dataset.

ReferenceSource bundles the three side-effecting steps the pipeline needs
(download, unzip, decode) so the matching and merge logic can be driven by
an in-memory fake in tests.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel
from tqdm import tqdm

from waymarks.errors import AcquisitionError
from waymarks.geonames import read_tsv

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


async def download_file(
    url: str,
    output_path: Path,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """
    Stream `url` into `output_path`.
    The body is written to a sibling .part file and renamed once complete,
    so an interrupted download never leaves `output_path` behind.
    """
    part_path = output_path.with_name(output_path.name + ".part")

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            async with client.stream("GET", url) as resp:
                if not resp.is_success:
                    raise AcquisitionError(f"Failed to download {url}: HTTP {resp.status_code}")

                content_length = resp.headers.get("Content-Length")
                if content_length is None:
                    raise AcquisitionError(f"Failed to download {url}: missing content-length header")
                try:
                    total_size = int(content_length)
                except ValueError as e:
                    raise AcquisitionError(
                        f"Failed to download {url}: invalid content-length header {content_length!r}"
                    ) from e

                with part_path.open("wb") as f, tqdm(
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    desc=output_path.name,
                    disable=None,
                ) as pb:
                    async for chunk in resp.aiter_bytes():
                        f.write(chunk)
                        pb.update(len(chunk))

        part_path.replace(output_path)
    except httpx.HTTPError as e:
        logger.error("Request error downloading %s: %s", url, e)
        raise AcquisitionError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        raise AcquisitionError(f"Failed to write {output_path}: {e}") from e
    finally:
        part_path.unlink(missing_ok=True)

    logger.info("Downloaded %s (%d bytes)", output_path, total_size)


async def ensure_file(
    url: str,
    output_path: Path,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Download `url` to `output_path` unless the file is already there."""
    output_path = Path(output_path)
    if output_path.exists():
        logger.info("File %s already exists, skipping download", output_path)
        return

    logger.info("Downloading %s -> %s", url, output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AcquisitionError(f"Failed to create directory {output_path.parent}: {e}") from e
    await download_file(url, output_path, timeout=timeout, transport=transport)


def _unzip(zip_path: Path, output_dir: Path) -> list[Path]:
    extracted: list[Path] = []
    root = output_dir.resolve()

    with zipfile.ZipFile(zip_path) as archive:
        for info in archive.infolist():
            out_path = output_dir / info.filename
            if not out_path.resolve().is_relative_to(root):
                raise AcquisitionError(f"Refusing to extract {info.filename} outside {output_dir}")
            if out_path.exists():
                logger.info("Skipping %s, already exists", out_path)
                continue

            if info.is_dir():
                out_path.mkdir(parents=True, exist_ok=True)
                continue

            out_path.parent.mkdir(parents=True, exist_ok=True)
            part_path = out_path.with_name(out_path.name + ".part")
            try:
                with archive.open(info) as src, part_path.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                part_path.replace(out_path)
            finally:
                part_path.unlink(missing_ok=True)
            extracted.append(out_path)
            logger.info("Extracted %s", out_path)

    return extracted


async def unzip_file(zip_path: Path, output_dir: Path) -> list[Path]:
    """Extract every entry of `zip_path` whose destination does not exist yet."""
    try:
        return await asyncio.to_thread(_unzip, Path(zip_path), Path(output_dir))
    except (zipfile.BadZipFile, OSError, EOFError, zlib.error) as e:
        raise AcquisitionError(f"Failed to extract {zip_path}: {e}") from e


class ReferenceSource:
    """Download/extract/decode capability backed by the network and local disk."""

    def __init__(
        self,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def ensure(self, url: str, path: Path) -> None:
        await ensure_file(url, path, timeout=self.timeout, transport=self._transport)

    async def extract(self, archive_path: Path, output_dir: Path) -> None:
        await unzip_file(archive_path, output_dir)

    def decode(self, path: Path, model: type[T]) -> list[T]:
        return read_tsv(path, model)
