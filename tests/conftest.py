"""Pytest configuration and fixtures."""

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.prompts.cache import get_prompt_cache
from app.domain.prompts.errors import PromptNotFoundError
from app.domain.prompts.selector import select_version
from app.persistence.database import Base, get_db
from app.persistence.models import *  # noqa: F401, F403

PROJECT = "acme"


@dataclass
class FakePrompt:
    id: int
    key: str
    type: str = "system"


@dataclass
class FakeVersion:
    id: int
    version_tag: str
    prompt_text: str
    prompt: FakePrompt
    status: str = "active"
    language_code: str = "en"
    created_at: datetime | None = None


@dataclass
class FakeAssetVersion:
    id: int
    version_tag: str
    value: str
    status: str = "active"
    language_code: str = "en"
    created_at: datetime | None = None


@dataclass
class FakeAsset:
    id: int
    key: str
    versions: list[FakeAssetVersion] = field(default_factory=list)


@dataclass
class FakeTranslation:
    prompt_text: str | None = None
    value: str | None = None


class FakePromptStore:
    """In-memory prompt store that records every lookup."""

    def __init__(self) -> None:
        self.prompts: dict[tuple[str, str], FakePrompt] = {}
        self.versions: dict[tuple[str, str], list[FakeVersion]] = {}
        self.translations: dict[tuple[int, str], FakeTranslation] = {}
        self.assets: dict[tuple[str, str, str], FakeAsset] = {}
        self.asset_translations: dict[tuple[int, str], FakeTranslation] = {}
        self.calls: list[tuple[Any, ...]] = []
        self._ids = itertools.count(1)
        self._clock = itertools.count()
        self._epoch = datetime(2026, 1, 1)

    def _now(self) -> datetime:
        return self._epoch + timedelta(seconds=next(self._clock))

    def add_prompt(
        self,
        key: str,
        text: str,
        project_id: str = PROJECT,
        version_tag: str = "v1",
        status: str = "active",
        language_code: str = "en",
        prompt_type: str = "system",
    ) -> FakeVersion:
        prompt = self.prompts.setdefault(
            (project_id, key), FakePrompt(id=next(self._ids), key=key, type=prompt_type)
        )
        self.versions.setdefault((project_id, key), [])
        return self.add_version(key, version_tag, text, project_id, status, language_code, prompt)

    def add_version(
        self,
        key: str,
        version_tag: str,
        text: str,
        project_id: str = PROJECT,
        status: str = "draft",
        language_code: str = "en",
        prompt: FakePrompt | None = None,
    ) -> FakeVersion:
        version = FakeVersion(
            id=next(self._ids),
            version_tag=version_tag,
            prompt_text=text,
            prompt=prompt or self.prompts[(project_id, key)],
            status=status,
            language_code=language_code,
            created_at=self._now(),
        )
        self.versions[(project_id, key)].append(version)
        return version

    def add_translation(self, version: FakeVersion, language_code: str, text: str) -> None:
        self.translations[(version.id, language_code)] = FakeTranslation(prompt_text=text)

    def add_asset(
        self,
        prompt_key: str,
        asset_key: str,
        value: str | None = None,
        project_id: str = PROJECT,
        version_tag: str = "v1",
        status: str = "active",
    ) -> FakeAssetVersion | None:
        """Add an asset version, or an asset without versions when value is None."""
        asset = self.assets.setdefault(
            (project_id, prompt_key, asset_key), FakeAsset(id=next(self._ids), key=asset_key)
        )
        if value is None:
            return None
        version = FakeAssetVersion(
            id=next(self._ids),
            version_tag=version_tag,
            value=value,
            status=status,
            created_at=self._now(),
        )
        asset.versions.append(version)
        return version

    def add_asset_translation(self, version: FakeAssetVersion, language_code: str, value: str) -> None:
        self.asset_translations[(version.id, language_code)] = FakeTranslation(value=value)

    async def get_prompt_version(self, project_id, prompt_key, version_tag):
        self.calls.append(("get_prompt_version", project_id, prompt_key, version_tag))
        if (project_id, prompt_key) not in self.prompts:
            raise PromptNotFoundError(project_id, prompt_key)
        return select_version(
            self.versions[(project_id, prompt_key)],
            version_tag,
            subject=f'prompt "{prompt_key}" in project "{project_id}"',
        )

    async def get_prompt_translation(self, version_id, language_code):
        self.calls.append(("get_prompt_translation", version_id, language_code))
        return self.translations.get((version_id, language_code))

    async def get_asset(self, project_id, prompt_key, asset_key):
        self.calls.append(("get_asset", project_id, prompt_key, asset_key))
        return self.assets.get((project_id, prompt_key, asset_key))

    async def get_asset_translation(self, asset_version_id, language_code):
        self.calls.append(("get_asset_translation", asset_version_id, language_code))
        return self.asset_translations.get((asset_version_id, language_code))


@pytest.fixture
def store():
    """Create an empty in-memory prompt store."""
    return FakePromptStore()


@pytest.fixture(autouse=True)
def clear_prompt_cache():
    """Start every test with an empty shared prompt cache."""
    get_prompt_cache().invalidate()
    yield
    get_prompt_cache().invalidate()


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def client(db_session):
    """Create a test HTTP client bound to the test database session."""
    from app.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
