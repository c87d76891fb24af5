"""
Bingo Kernel: template catalog and sheet factory

The catalog is read-only: a mapping from template key to title and ordered
cell definitions. Sheets are built from it and never written back.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from bingo.config import settings
from bingo.kernel.errors import UnknownTemplateKey
from bingo.kernel.types import Cell, Sheet, Template, new_id

logger = logging.getLogger(__name__)

BUNDLED_TEMPLATES = Path(__file__).parent / "templates.json"


class TemplateCatalog:
    """Template key -> Template, in catalog order."""

    def __init__(self, templates: Mapping[str, Template]):
        self._templates = dict(templates)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemplateCatalog:
        return cls({key: Template.from_dict(key, d) for key, d in data.items()})

    @classmethod
    def from_file(cls, path: str | Path) -> TemplateCatalog:
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def get(self, key: str) -> Template:
        try:
            return self._templates[key]
        except KeyError:
            raise UnknownTemplateKey(key) from None

    def keys(self) -> list[str]:
        return list(self._templates)

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


@lru_cache(maxsize=1)
def load_default_catalog() -> TemplateCatalog:
    """Catalog from BINGO_TEMPLATES_PATH, or the bundled templates.json."""
    path = Path(settings.TEMPLATES_PATH) if settings.TEMPLATES_PATH else BUNDLED_TEMPLATES
    catalog = TemplateCatalog.from_file(path)
    logger.debug("Loaded %d templates from %s", len(catalog), path)
    return catalog


def create_new_sheet(template_key: str, catalog: TemplateCatalog | None = None) -> Sheet:
    """
    Build a fresh, unsaved sheet from a template.

    One empty cell per template cell, in template order. Sheet and cell ids
    are new; every cell points back at the sheet.
    Raises UnknownTemplateKey if the key is not in the catalog.
    """
    if catalog is None:
        catalog = load_default_catalog()
    template = catalog.get(template_key)

    sheet_id = new_id()
    return Sheet(
        id=sheet_id,
        key=template.key,
        title=template.title,
        cells=[
            Cell(
                id=new_id(),
                sheet_id=sheet_id,
                title=tc.title,
                description=tc.description,
            )
            for tc in template.cells
        ],
    )
