"""
Reader for GeoNames dump files.

The dumps are tab-separated with no header row and no quoting; lines
starting with '#' are comments. Columns are mapped positionally onto the
fields of the target model, extra trailing columns are ignored.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from waymarks.errors import AcquisitionError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# alternatenames can exceed the csv module's default field limit
FIELD_SIZE_LIMIT = 2**31 - 1


def read_tsv(path: Path, model: type[T]) -> list[T]:
    """
    Parse a GeoNames TSV file into a list of `model` instances.
    Any malformed row fails the whole read.
    """
    path = Path(path)
    columns = list(model.model_fields)
    records: list[T] = []

    previous_limit = csv.field_size_limit(FIELD_SIZE_LIMIT)
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
            for row in reader:
                if not row or (len(row) == 1 and not row[0].strip()):
                    continue
                if row[0].startswith("#"):
                    continue
                try:
                    records.append(model.model_validate(dict(zip(columns, row))))
                except ValidationError as e:
                    raise AcquisitionError(
                        f"Failed to deserialize record at {path}:{reader.line_num}: {e}"
                    ) from e
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise AcquisitionError(f"Failed to read TSV file {path}: {e}") from e
    finally:
        csv.field_size_limit(previous_limit)

    logger.info("Read %d %s records from %s", len(records), model.__name__, path)
    return records
