import sys
from pathlib import Path
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest

# Add project root (1 level up from tests/) to sys.path so tests can import 'speechrelay'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from speechrelay.models.database import Base
from speechrelay.config.settings import Settings


class FakeEngine:
    """Minimal TranslationEngine used to drive the registry and fallback."""

    def __init__(self, name: str = "Mock Translation Engine", available: bool = True, result: str = "translated text"):
        self.name = name
        self.available = available
        self.translate = AsyncMock(return_value=result)
        self.initialize = AsyncMock(return_value=None)

    def is_available(self) -> bool:
        return self.available

    def get_name(self) -> str:
        return self.name

    async def get_supported_languages(self) -> List[Dict[str, str]]:
        return [{"code": "en", "name": "English"}, {"code": "es", "name": "Spanish"}]

    def estimate_cost(self, text: str, source_lang: str = "", target_lang: str = "") -> float:
        return 0.001


@pytest.fixture
def make_engine():
    return FakeEngine


@pytest.fixture
def test_settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        GOOGLE_CLOUD_PROJECT_ID="test-project",
        GROK_API_KEY="test-key",
        GROK_API_BASE_URL="https://grok.test/v1/",
    )


@pytest.fixture
async def session_factory():
    """In-memory SQLite database with the project's tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
