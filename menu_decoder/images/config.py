from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ImageConfig:
    unsplash_key: str = os.getenv("UNSPLASH_KEY", "")
    search_url: str = "https://api.unsplash.com/search/photos"
    query_suffix: str = "food dish"
    timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))


DEFAULT_IMAGE_CONFIG = ImageConfig()
