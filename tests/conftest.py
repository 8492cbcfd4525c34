"""Test configuration shared by every test module.

Environment variables are set before any ``book_catalog`` import so the
configuration loaded at import time points at test resources.
"""

import os
import tempfile
from pathlib import Path

_ROOT = Path(__file__).resolve().parent.parent

os.environ.setdefault("BOOK_CATALOG_CONFIG", str(_ROOT / "config.yaml"))
os.environ["APP_ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PUBLIC_BASE_URL"] = "http://covers.test"
os.environ["COVERS_DIR"] = tempfile.mkdtemp(prefix="book-catalog-covers-")

from tests.fixtures import *  # noqa: E402,F401,F403
