"""
Bingo Kernel: sheet state, share tokens and local persistence.

  templates  read-only catalog + create_new_sheet
  codec      sheet <-> compact base64 share token
  links      token <-> share URL
  storage    key-value slots + SheetStore (current / backup)
  transfer   whole-collection export / import
  session    in-memory collection kept in step with the store
"""

from bingo.kernel.codec import decode_sheet, encode_sheet
from bingo.kernel.links import build_share_link, extract_token
from bingo.kernel.session import SheetSession
from bingo.kernel.storage import FilePersistence, MemoryPersistence, SheetStore
from bingo.kernel.templates import TemplateCatalog, create_new_sheet, load_default_catalog
from bingo.kernel.transfer import export_all, import_all, import_file

__all__ = [
    "create_new_sheet",
    "load_default_catalog",
    "TemplateCatalog",
    "encode_sheet",
    "decode_sheet",
    "build_share_link",
    "extract_token",
    "MemoryPersistence",
    "FilePersistence",
    "SheetStore",
    "export_all",
    "import_all",
    "import_file",
    "SheetSession",
]
