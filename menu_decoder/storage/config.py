from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StorageConfig:
    url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///menu_decoder.db")


DEFAULT_STORAGE_CONFIG = StorageConfig()
