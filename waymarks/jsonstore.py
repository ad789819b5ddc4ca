"""
JSON persistence shared by the country and city stores.

Writes go to a temp file in the destination directory and are moved into
place with os.replace, so the destination either keeps its previous content
or holds the complete new document.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from waymarks.errors import DecodeError, PersistError

logger = logging.getLogger(__name__)


def load_json(path: Path, adapter: TypeAdapter) -> Any:
    """
    Read and validate a JSON document.
    Raises FileNotFoundError when the file does not exist (callers decide
    whether that means "empty"); any other failure is a DecodeError.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise DecodeError(f"Failed to read {path}: {e}") from e

    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        raise DecodeError(f"Invalid content in {path}: {e}") from e


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_json(path: Path, data: Any) -> None:
    """
    Serialize `data` with sorted keys and atomically replace `path`.
    The new file keeps the mode of the file it replaces, or gets the umask
    default when `path` is new.
    """
    path = Path(path)
    payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
            tmp.write("\n")
        try:
            shutil.copymode(path, tmp_name)
        except FileNotFoundError:
            os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise PersistError(f"Failed to write {path}: {e}") from e

    logger.debug("Wrote %s", path)
