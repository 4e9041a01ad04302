from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


class Provider(str, Enum):
    google = "google"
    yelp = "yelp"
    llm = "llm"


@dataclass(frozen=True)
class UsageLimits:
    google: int = int(os.getenv("GOOGLE_DAILY_LIMIT", "50"))
    yelp: int = int(os.getenv("YELP_DAILY_LIMIT", "450"))
    llm: int = int(os.getenv("LLM_DAILY_LIMIT", "200"))

    def limit_for(self, provider: Provider) -> int:
        return getattr(self, Provider(provider).value)


DEFAULT_USAGE_LIMITS = UsageLimits()

LIMIT_REACHED_MESSAGE = "Daily exploration limit reached. Showing cached popular restaurants."
