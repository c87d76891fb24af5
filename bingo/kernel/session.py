"""
Bingo Kernel: session

Holds one user's collection in memory and keeps the store in step with it.
Coordinates templates + codec + links + storage + transfer, the way the
sheet list screen drives them: every mutation is saved immediately;
import and restore reload from the store afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bingo.kernel import transfer
from bingo.kernel.codec import decode_sheet
from bingo.kernel.errors import CellNotFound, SheetNotFound
from bingo.kernel.links import build_share_link, extract_token
from bingo.kernel.storage import SheetStore
from bingo.kernel.templates import TemplateCatalog, create_new_sheet, load_default_catalog
from bingo.kernel.types import Cell, Collection, ImportResult, Sheet

logger = logging.getLogger(__name__)

IMPORTED_SUFFIX = " (Imported)"


class SheetSession:
    def __init__(self, store: SheetStore, catalog: TemplateCatalog | None = None):
        self.store = store
        self.catalog = catalog if catalog is not None else load_default_catalog()
        self.sheets: Collection = store.load_collection()

    def _save(self) -> None:
        self.store.save_collection(self.sheets)

    def _reload(self) -> None:
        self.sheets = self.store.load_collection()

    def get_sheet(self, sheet_id: str) -> Sheet:
        try:
            return self.sheets[sheet_id]
        except KeyError:
            raise SheetNotFound(sheet_id) from None

    def first_sheet(self) -> Sheet | None:
        return next(iter(self.sheets.values()), None)

    # -- sheets --

    def create_sheet(self, template_key: str) -> Sheet:
        sheet = create_new_sheet(template_key, self.catalog)
        self.sheets[sheet.id] = sheet
        self._save()
        return sheet

    def delete_sheet(self, sheet_id: str) -> None:
        if self.sheets.pop(sheet_id, None) is not None:
            self._save()

    def rename_sheet(self, sheet_id: str, title: str) -> Sheet:
        sheet = self.get_sheet(sheet_id)
        sheet.title = title
        self._save()
        return sheet

    def update_cell(
        self,
        sheet_id: str,
        cell_id: str,
        *,
        input: str | None = None,
        is_hard_mode: bool | None = None,
    ) -> Cell:
        cell = self.get_sheet(sheet_id).get_cell(cell_id)
        if cell is None:
            raise CellNotFound(cell_id)
        if input is not None:
            cell.input = input
        if is_hard_mode is not None:
            cell.is_hard_mode = is_hard_mode
        self._save()
        return cell

    # -- share links --

    def share_link(self, sheet_id: str, base_url: str | None = None) -> str:
        return build_share_link(self.get_sheet(sheet_id), base_url)

    def open_link(self, url: str) -> Sheet | None:
        """
        Add the sheet shared in url as a new sheet.
        Returns None (collection unchanged) when url has no token or the
        token does not decode.
        """
        token = extract_token(url)
        if token is None:
            return None

        result = decode_sheet(token, self.catalog)
        if not result.ok:
            return None

        sheet = result.sheet
        sheet.title = sheet.title + IMPORTED_SUFFIX
        self.sheets[sheet.id] = sheet
        self._save()
        logger.info("Added shared sheet %s (%s)", sheet.id, sheet.key)
        return sheet

    # -- whole collection --

    def export_all(self) -> bytes:
        return transfer.export_all(self.sheets)

    def write_export(self, path: str | Path) -> Path:
        return transfer.write_export(self.sheets, path)

    def import_all(self, contents: str | bytes) -> ImportResult:
        result = transfer.import_all(self.store, contents)
        if result.applied:
            self._reload()
        return result

    async def import_file(self, path: str | Path) -> ImportResult:
        result = await transfer.import_file(self.store, path)
        if result.applied:
            self._reload()
        return result

    def restore_backup(self) -> bool:
        restored = self.store.restore_backup()
        if restored:
            self._reload()
        return restored
