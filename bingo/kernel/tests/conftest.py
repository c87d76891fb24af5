"""
Bingo kernel test configuration.

Every test gets its own MemoryPersistence; nothing touches the real
storage directory.
"""

import pytest

from bingo.kernel.storage import MemoryPersistence, SheetStore
from bingo.kernel.templates import TemplateCatalog


@pytest.fixture
def catalog():
    """Small three-cell catalog, independent of the bundled templates."""
    return TemplateCatalog.from_dict({
        "mini": {
            "title": "Mini Bingo",
            "cells": [
                {"title": "Dragons", "description": "A dragon is a main character."},
                {"title": "Heist", "description": "The plot centres on a heist."},
                {"title": "Reread", "description": "A book you have read before."},
            ],
        },
        "pair": {
            "title": "Pair",
            "cells": [
                {"title": "Left"},
                {"title": "Right"},
            ],
        },
    })


@pytest.fixture
def persistence():
    return MemoryPersistence()


@pytest.fixture
def store(persistence):
    return SheetStore(persistence, current_key="current", backup_key="backup")
