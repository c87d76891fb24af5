"""
Bingo Kernel: Error taxonomy

Every failure carries a stable `code` so callers can report it without
matching on class names. Codec and import failures are returned inside
result objects (see types.DecodeResult / types.ImportResult); the factory
and the session raise.
"""

from __future__ import annotations


class SheetError(Exception):
    """Base class for all kernel errors."""

    code = "sheet_error"


class UnknownTemplateKey(SheetError, KeyError):
    """Template key is not in the catalog."""

    code = "unknown_template_key"

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown template key: {self.key!r}"


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

class CodecError(SheetError):
    """A share token could not be turned back into a sheet."""

    code = "codec_error"


class MalformedToken(CodecError):
    """Token is empty or not valid base64."""

    code = "malformed_token"


class CorruptPayload(CodecError):
    """Token decoded, but the compressed stream is invalid."""

    code = "corrupt_payload"


class MalformedPayload(CodecError):
    """Decompressed text is not the {key, cells} structure."""

    code = "malformed_payload"


class CellCountMismatch(CodecError):
    """Token carries a different number of cells than the template has."""

    code = "cell_count_mismatch"

    def __init__(self, key: str, expected: int, actual: int):
        super().__init__(key, expected, actual)
        self.key = key
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"Template {self.key!r} has {self.expected} cells, token has {self.actual}"


# ---------------------------------------------------------------------------
# Import / session
# ---------------------------------------------------------------------------

class ImportFailure(SheetError):
    """Imported file could not be read or is not a valid collection."""

    code = "import_error"


class SheetNotFound(SheetError, KeyError):
    code = "sheet_not_found"


class CellNotFound(SheetError, KeyError):
    code = "cell_not_found"
