"""
Bingo Kernel: whole-collection import / export

Export is pretty-printed, uncompressed JSON meant for humans and backups.
Import replaces the stored collection (the store backs up the old one
first) and only ever runs the replace on a collection that validated.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from bingo.kernel.errors import ImportFailure
from bingo.kernel.schema import validate_collection_json
from bingo.kernel.storage import SheetStore
from bingo.kernel.types import Collection, ImportResult, collection_from_dict, collection_to_dict

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "MyBingoSheets.json"


def export_all(collection: Collection) -> bytes:
    return json.dumps(collection_to_dict(collection), indent=2, ensure_ascii=False).encode("utf-8")


def write_export(collection: Collection, path: str | Path) -> Path:
    """Write the export blob. A directory path gets EXPORT_FILENAME appended."""
    path = Path(path)
    if path.is_dir():
        path = path / EXPORT_FILENAME
    path.write_bytes(export_all(collection))
    return path


def _reject(error: ImportFailure) -> ImportResult:
    logger.warning("Import rejected: %s", error)
    return ImportResult(applied=False, error=error)


def import_all(store: SheetStore, contents: str | bytes) -> ImportResult:
    """
    Replace the stored collection with the one in contents.
    Invalid contents leave both storage slots untouched.
    """
    try:
        collection = collection_from_dict(validate_collection_json(contents))
    except (ValidationError, ValueError) as e:
        return _reject(ImportFailure(f"not a sheet collection: {e}"))

    store.replace_collection(collection)
    return ImportResult(applied=True, sheet_count=len(collection))


async def import_file(store: SheetStore, path: str | Path) -> ImportResult:
    """Read path off the event loop, then import_all. Read errors are returned."""
    try:
        contents = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        return _reject(ImportFailure(f"could not read {path}: {e}"))
    return import_all(store, contents)
