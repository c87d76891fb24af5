"""
Bingo Kernel: wire schemas

Pydantic models for the two untyped JSON blobs the kernel reads back:
the stored/exported collection and the decompressed share payload.
Anything that does not validate is treated by the caller as absent.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, TypeAdapter, model_validator


class StoredCell(BaseModel):
    model_config = {"extra": "ignore"}

    sheetId: StrictStr
    id: StrictStr
    title: StrictStr
    description: StrictStr = ""
    input: StrictStr | None = ""
    isHardMode: StrictBool = False


class StoredSheet(BaseModel):
    model_config = {"extra": "ignore"}

    key: StrictStr
    id: StrictStr
    title: StrictStr
    cells: list[StoredCell]

    @model_validator(mode="after")
    def cells_belong_to_sheet(self) -> StoredSheet:
        for cell in self.cells:
            if cell.sheetId != self.id:
                raise ValueError(f"cell {cell.id} belongs to sheet {cell.sheetId}, not {self.id}")
        return self


_collection_adapter = TypeAdapter(dict[str, StoredSheet])


def validate_collection_json(text: str | bytes) -> dict[str, Any]:
    """
    Parse and validate a stored or imported collection in one step.

    Uses pydantic's JSON parser, which bounds nesting depth, so hostile
    input fails as ValidationError instead of exhausting the stack.
    Returns the plain-dict form (ready for collection_from_dict).
    Raises pydantic.ValidationError or ValueError on mismatch.
    """
    sheets = _collection_adapter.validate_json(text)
    for sheet_id, sheet in sheets.items():
        if sheet.id != sheet_id:
            raise ValueError(f"collection key {sheet_id} does not match sheet id {sheet.id}")
    return {sheet_id: sheet.model_dump() for sheet_id, sheet in sheets.items()}


class MinimizedCell(BaseModel):
    """One cell in a share token: i = input, h = hard mode (0/1)."""

    model_config = {"extra": "forbid"}

    i: StrictStr
    h: Annotated[StrictInt, Field(ge=0, le=1)]


class TokenPayload(BaseModel):
    model_config = {"extra": "forbid"}

    key: StrictStr
    cells: list[MinimizedCell]
