"""
Bingo Kernel: Shared Types

Data classes used across templates, codec, storage and session.

Wire shape of a stored sheet (camelCase, same as the exported file):

    {
      "key": "2023",
      "id": "<uuid4>",
      "title": "2023 Bingo",
      "cells": [
        {"sheetId": "<uuid4>", "id": "<uuid4>", "title": "...",
         "description": "...", "input": "", "isHardMode": false}
      ]
    }
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from bingo.kernel.errors import ImportFailure, SheetError


def new_id() -> str:
    """Fresh opaque identifier for a sheet or a cell."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateCell:
    title: str
    description: str = ""


@dataclass(frozen=True)
class Template:
    """Read-only board definition. Cell order is the board order."""

    key: str
    title: str
    cells: tuple[TemplateCell, ...]

    @classmethod
    def from_dict(cls, key: str, d: dict[str, Any]) -> Template:
        return cls(
            key=key,
            title=d["title"],
            cells=tuple(
                TemplateCell(title=c["title"], description=c.get("description", ""))
                for c in d["cells"]
            ),
        )


# ---------------------------------------------------------------------------
# Sheets
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    """
    One grid square. `input` and `is_hard_mode` are the only fields a user
    edits; everything else is fixed when the sheet is created.
    """

    id: str
    sheet_id: str
    title: str
    description: str
    input: str = ""
    is_hard_mode: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetId": self.sheet_id,
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "input": self.input,
            "isHardMode": self.is_hard_mode,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Cell:
        return cls(
            id=d["id"],
            sheet_id=d["sheetId"],
            title=d["title"],
            description=d.get("description", ""),
            input=d.get("input") or "",
            is_hard_mode=bool(d.get("isHardMode", False)),
        )


@dataclass
class Sheet:
    """A user's instance of a template."""

    id: str
    key: str
    title: str
    cells: list[Cell] = field(default_factory=list)

    def get_cell(self, cell_id: str) -> Cell | None:
        for cell in self.cells:
            if cell.id == cell_id:
                return cell
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "id": self.id,
            "title": self.title,
            "cells": [c.to_dict() for c in self.cells],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Sheet:
        return cls(
            id=d["id"],
            key=d["key"],
            title=d["title"],
            cells=[Cell.from_dict(c) for c in d["cells"]],
        )


# Sheet.id -> Sheet
Collection = dict[str, Sheet]


def collection_to_dict(collection: Collection) -> dict[str, Any]:
    return {sheet_id: sheet.to_dict() for sheet_id, sheet in collection.items()}


def collection_from_dict(d: dict[str, Any]) -> Collection:
    return {sheet_id: Sheet.from_dict(s) for sheet_id, s in d.items()}


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class DecodeResult:
    """
    Result of decoding a share token.
    The codec never throws on bad input; it always returns one of these,
    holding either a complete sheet or the error, never both.
    """

    sheet: Sheet | None = None
    error: SheetError | None = None

    @property
    def ok(self) -> bool:
        return self.sheet is not None


@dataclass
class ImportResult:
    """Result of importing a collection file."""

    applied: bool
    sheet_count: int = 0
    error: ImportFailure | None = None
