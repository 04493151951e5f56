"""Test configuration and fixtures for CareTrek.

The environment is pinned before any ``caretrek`` import so the default
configuration uses an in-memory database, no log file and cheap bcrypt.
"""

import os
from pathlib import Path

os.environ.setdefault("CARETREK_CONFIG", str(Path(__file__).parents[1] / "config.yaml"))
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from tests.fixtures import *  # noqa: E402,F401,F403
