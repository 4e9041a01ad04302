from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio

from menu_decoder.analytics.store import clear_events
from menu_decoder.llm.config import LLMConfig
from menu_decoder.storage.config import StorageConfig
from menu_decoder.storage.database import create_database, create_tables
from menu_decoder.usage.config import UsageLimits

TEST_LLM_CONFIG = LLMConfig(api_key="test-key", model="test-model")
TEST_LIMITS = UsageLimits(google=50, yelp=450, llm=200)


def groq_response(content: str) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture(autouse=True)
def _reset_events():
    clear_events()
    yield
    clear_events()


@pytest.fixture
def storage_config(tmp_path) -> StorageConfig:
    return StorageConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'menu_decoder.db'}")


@pytest_asyncio.fixture
async def db(storage_config):
    database = create_database(storage_config)
    await database.connect()
    await create_tables(database)
    yield database
    await database.disconnect()


@pytest.fixture
def llm_reply():
    """Patch AsyncGroq and return a setter for the completion text.

    The setter returns the ``create`` mock so tests can inspect calls.
    """
    with patch("menu_decoder.llm.groq_client.AsyncGroq") as mock_groq_cls:
        create = AsyncMock()
        mock_groq_cls.return_value.chat.completions.create = create

        def _set(content: str) -> AsyncMock:
            create.return_value = groq_response(content)
            return create

        yield _set


@pytest.fixture
def llm_config() -> LLMConfig:
    return TEST_LLM_CONFIG


@pytest.fixture
def limits() -> UsageLimits:
    return TEST_LIMITS
