"""
Share token codec tests.

Round trip keeps key and per-cell input/hard mode, in order; ids are new.
Every failure kind comes back as a DecodeResult error, never an exception,
never a partial sheet.
"""

import base64
import json
import zlib

import pytest

from bingo.kernel.codec import decode_sheet, encode_sheet, minimize_sheet
from bingo.kernel.errors import (
    CellCountMismatch,
    CorruptPayload,
    MalformedPayload,
    MalformedToken,
    UnknownTemplateKey,
)
from bingo.kernel.templates import create_new_sheet


def make_token(payload) -> str:
    """Build a token by hand from any JSON-able payload."""
    raw = json.dumps(payload).encode("utf-8")
    return base64.b64encode(zlib.compress(raw)).decode("ascii")


def assert_failed(result, error_type):
    assert result.sheet is None
    assert not result.ok
    assert isinstance(result.error, error_type)


# ============================================================================
# Minimize / encode
# ============================================================================


class TestMinimize:
    def test_only_key_and_cell_state(self, catalog):
        sheet = create_new_sheet("mini", catalog)
        sheet.cells[0].input = "Fourth Wing"
        sheet.cells[0].is_hard_mode = True

        assert minimize_sheet(sheet) == {
            "key": "mini",
            "cells": [
                {"i": "Fourth Wing", "h": 1},
                {"i": "", "h": 0},
                {"i": "", "h": 0},
            ],
        }

    def test_none_input_becomes_empty(self, catalog):
        sheet = create_new_sheet("mini", catalog)
        sheet.cells[2].input = None
        assert minimize_sheet(sheet)["cells"][2] == {"i": "", "h": 0}


class TestEncode:
    def test_token_is_base64_of_zlib_json(self, catalog):
        sheet = create_new_sheet("pair", catalog)
        token = encode_sheet(sheet)
        text = zlib.decompress(base64.b64decode(token)).decode("utf-8")
        assert text == '{"key":"pair","cells":[{"i":"","h":0},{"i":"","h":0}]}'

    def test_token_has_no_ids_or_titles(self, catalog):
        sheet = create_new_sheet("mini", catalog)
        text = zlib.decompress(base64.b64decode(encode_sheet(sheet))).decode("utf-8")
        assert sheet.id not in text
        assert "Dragons" not in text

    def test_deterministic(self, catalog):
        a = create_new_sheet("mini", catalog)
        b = create_new_sheet("mini", catalog)
        assert encode_sheet(a) == encode_sheet(b)


# ============================================================================
# Round trip
# ============================================================================


class TestRoundTrip:
    def test_edited_sheet(self, catalog):
        sheet = create_new_sheet("mini", catalog)
        sheet.title = "My renamed sheet"
        sheet.cells[0].input = "The Hobbit"
        sheet.cells[1].is_hard_mode = True
        sheet.cells[2].input = "Piranesi, again"
        sheet.cells[2].is_hard_mode = True

        result = decode_sheet(encode_sheet(sheet), catalog)

        assert result.ok
        assert result.error is None
        decoded = result.sheet
        assert decoded.key == "mini"
        # Title is not carried; it falls back to the template title
        assert decoded.title == "Mini Bingo"
        assert [c.input for c in decoded.cells] == ["The Hobbit", "", "Piranesi, again"]
        assert [c.is_hard_mode for c in decoded.cells] == [False, True, True]
        assert [c.title for c in decoded.cells] == ["Dragons", "Heist", "Reread"]

    def test_decoded_sheet_gets_new_identity(self, catalog):
        sheet = create_new_sheet("mini", catalog)
        decoded = decode_sheet(encode_sheet(sheet), catalog).sheet

        assert decoded.id != sheet.id
        assert not {c.id for c in decoded.cells} & {c.id for c in sheet.cells}
        assert all(c.sheet_id == decoded.id for c in decoded.cells)

    def test_unicode_input(self, catalog):
        sheet = create_new_sheet("pair", catalog)
        sheet.cells[0].input = "Ça va, 三体 🐉"
        decoded = decode_sheet(encode_sheet(sheet), catalog).sheet
        assert decoded.cells[0].input == "Ça va, 三体 🐉"

    def test_2023_scenario(self):
        sheet = create_new_sheet("2023")
        sheet.cells[3].input = "Alice"
        sheet.cells[3].is_hard_mode = True

        decoded = decode_sheet(encode_sheet(sheet)).sheet

        assert len(decoded.cells) == 25
        assert decoded.cells[3].input == "Alice"
        assert decoded.cells[3].is_hard_mode is True
        others = decoded.cells[:3] + decoded.cells[4:]
        assert all(c.input == "" and c.is_hard_mode is False for c in others)


# ============================================================================
# Failures
# ============================================================================


class TestMalformedToken:
    @pytest.mark.parametrize("token", ["", "not-base64!!", "abc", "Zm9v=x", "ÿÿÿÿ"])
    def test_rejected(self, catalog, token):
        assert_failed(decode_sheet(token, catalog), MalformedToken)

    def test_error_code(self, catalog):
        assert decode_sheet("", catalog).error.code == "malformed_token"


class TestCorruptPayload:
    def test_valid_base64_but_not_zlib(self, catalog):
        token = base64.b64encode(b"definitely not deflate").decode("ascii")
        assert_failed(decode_sheet(token, catalog), CorruptPayload)

    def test_truncated_stream(self, catalog):
        compressed = zlib.compress(b'{"key":"pair","cells":[]}')
        token = base64.b64encode(compressed[:-6]).decode("ascii")
        assert_failed(decode_sheet(token, catalog), CorruptPayload)


class TestMalformedPayload:
    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "just a string",
            {"cells": []},
            {"key": "pair"},
            {"key": 2023, "cells": []},
            {"key": "pair", "cells": [{"i": "", "h": 0}, {"i": ""}]},
            {"key": "pair", "cells": [{"i": "", "h": 0}, {"i": "", "h": 2}]},
            {"key": "pair", "cells": [{"i": 5, "h": 0}, {"i": "", "h": 0}]},
            {"key": "pair", "cells": [{"i": "", "h": 0, "x": 1}, {"i": "", "h": 0}]},
            {"key": "pair", "cells": [{"i": "", "h": True}, {"i": "", "h": 0}]},
            {"key": "pair", "cells": [{"i": "", "h": 1.0}, {"i": "", "h": 0}]},
            {"key": "pair", "cells": [{"i": "", "h": "1"}, {"i": "", "h": 0}]},
        ],
    )
    def test_schema_mismatch(self, catalog, payload):
        assert_failed(decode_sheet(make_token(payload), catalog), MalformedPayload)

    def test_not_json(self, catalog):
        token = base64.b64encode(zlib.compress(b"{key: pair")).decode("ascii")
        assert_failed(decode_sheet(token, catalog), MalformedPayload)

    def test_not_utf8(self, catalog):
        token = base64.b64encode(zlib.compress(b"\xff\xfe\xfd")).decode("ascii")
        assert_failed(decode_sheet(token, catalog), MalformedPayload)

    def test_deeply_nested(self, catalog):
        raw = b"[" * 100_000 + b"]" * 100_000
        token = base64.b64encode(zlib.compress(raw)).decode("ascii")
        assert_failed(decode_sheet(token, catalog), MalformedPayload)

    def test_oversized_integer(self, catalog):
        raw = '{"key":"pair","cells":[{"i":"","h":' + "9" * 5000 + '},{"i":"","h":0}]}'
        token = base64.b64encode(zlib.compress(raw.encode("ascii"))).decode("ascii")
        assert_failed(decode_sheet(token, catalog), MalformedPayload)


class TestUnknownTemplateKey:
    def test_key_missing_from_catalog(self, catalog):
        token = make_token({"key": "1999", "cells": []})
        result = decode_sheet(token, catalog)
        assert_failed(result, UnknownTemplateKey)
        assert result.error.key == "1999"


class TestCellCountMismatch:
    def test_too_few_cells(self, catalog):
        token = make_token({"key": "mini", "cells": [{"i": "a", "h": 0}]})
        result = decode_sheet(token, catalog)
        assert_failed(result, CellCountMismatch)
        assert result.error.expected == 3
        assert result.error.actual == 1

    def test_too_many_cells(self, catalog):
        cells = [{"i": "", "h": 0}] * 4
        assert_failed(decode_sheet(make_token({"key": "mini", "cells": cells}), catalog), CellCountMismatch)

    def test_token_for_other_template_size(self, catalog):
        sheet = create_new_sheet("pair", catalog)
        token = make_token({"key": "mini", "cells": minimize_sheet(sheet)["cells"]})
        assert_failed(decode_sheet(token, catalog), CellCountMismatch)


class TestLogging:
    def test_rejection_logged_with_code(self, catalog, caplog):
        with caplog.at_level("WARNING", logger="bingo.kernel.codec"):
            decode_sheet("not-base64!!", catalog)
        assert "malformed_token" in caplog.text

    def test_success_not_logged(self, catalog, caplog):
        sheet = create_new_sheet("pair", catalog)
        with caplog.at_level("WARNING", logger="bingo.kernel.codec"):
            decode_sheet(encode_sheet(sheet), catalog)
        assert caplog.text == ""
