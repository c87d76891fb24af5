"""
Bingo configuration: all environment variables in one place.

Read from environment at import. Nothing here is required; every setting
has a local-first default.
"""

from __future__ import annotations

import os
from pathlib import Path


class Settings:
    """Settings from environment variables."""

    # Storage
    STORAGE_DIR: str = os.environ.get("BINGO_STORAGE_DIR", str(Path.home() / ".bingo"))
    CURRENT_SLOT: str = os.environ.get("BINGO_CURRENT_SLOT", "bingoSheets")
    BACKUP_SLOT: str = os.environ.get("BINGO_BACKUP_SLOT", "bingoSheetsBackup")

    # Share links
    SHARE_PARAM: str = os.environ.get("BINGO_SHARE_PARAM", "data")
    SHARE_BASE_URL: str = os.environ.get("BINGO_SHARE_BASE_URL", "http://localhost:3000")

    # Templates (empty = bundled templates.json)
    TEMPLATES_PATH: str = os.environ.get("BINGO_TEMPLATES_PATH", "")


# Singleton instance
settings = Settings()
