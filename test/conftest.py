"""
Point the relay at a throwaway SQLite file before any test imports it.
"""

import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="tileduel-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'rooms.db')}"
