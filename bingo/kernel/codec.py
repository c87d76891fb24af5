"""
Bingo Kernel: share token codec

A token carries only what the user typed: the template key plus one
{i, h} record per cell. Titles, descriptions and ids are re-derived from
the template on decode, so token size tracks user content only.

    sheet -> {"key", "cells": [{"i", "h"}]} -> compact JSON -> zlib -> base64

Decoding never raises on bad input and never returns a partial sheet.
A decoded sheet always has brand-new ids: the token carries no identity.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import zlib
from typing import Any

from pydantic import ValidationError

from bingo.kernel.errors import (
    CellCountMismatch,
    CorruptPayload,
    MalformedPayload,
    MalformedToken,
    SheetError,
)
from bingo.kernel.schema import TokenPayload
from bingo.kernel.templates import TemplateCatalog, create_new_sheet, load_default_catalog
from bingo.kernel.types import DecodeResult, Sheet

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Minimization
# ---------------------------------------------------------------------------


def minimize_sheet(sheet: Sheet) -> dict[str, Any]:
    """Project a sheet onto the fields a token carries."""
    return {
        "key": sheet.key,
        "cells": [
            {"i": cell.input or "", "h": 1 if cell.is_hard_mode else 0}
            for cell in sheet.cells
        ],
    }


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def encode_sheet(sheet: Sheet) -> str:
    """Sheet -> base64 token. The token is not percent-encoded."""
    text = json.dumps(minimize_sheet(sheet), separators=(",", ":"), ensure_ascii=False)
    compressed = zlib.compress(text.encode("utf-8"))
    return base64.b64encode(compressed).decode("ascii")


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def _unwrap(token: str) -> TokenPayload:
    """base64 -> zlib -> JSON -> validated payload. Raises CodecError."""
    if not token:
        raise MalformedToken("empty token")
    try:
        compressed = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedToken(str(e)) from e

    try:
        raw = zlib.decompress(compressed)
    except zlib.error as e:
        raise CorruptPayload(str(e)) from e

    try:
        return TokenPayload.model_validate_json(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValidationError) as e:
        raise MalformedPayload(str(e)) from e


def decode_sheet(token: str, catalog: TemplateCatalog | None = None) -> DecodeResult:
    """
    Token -> new sheet.

    Failures (returned, not raised):
      MalformedToken      bad base64 alphabet/padding, or empty
      CorruptPayload      invalid compressed stream
      MalformedPayload    not the {key, cells:[{i,h}]} structure
      UnknownTemplateKey  key no longer in the catalog
      CellCountMismatch   cell count differs from the template
    """
    if catalog is None:
        catalog = load_default_catalog()

    try:
        payload = _unwrap(token)
        sheet = create_new_sheet(payload.key, catalog)
        if len(payload.cells) != len(sheet.cells):
            raise CellCountMismatch(payload.key, len(sheet.cells), len(payload.cells))
    except SheetError as e:
        logger.warning("Rejected share token (%s): %s", e.code, e)
        return DecodeResult(error=e)

    for cell, minimized in zip(sheet.cells, payload.cells):
        cell.input = minimized.i
        cell.is_hard_mode = minimized.h == 1

    return DecodeResult(sheet=sheet)
