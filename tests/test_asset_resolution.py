"""Tests for asset placeholder resolution."""

import logging

import pytest

from app.domain.prompts.assets import AssetResolver
from app.domain.prompts.errors import AssetVersionNotFoundError
from app.domain.prompts.types import LanguageSource

PROJECT = "acme"


@pytest.mark.asyncio
async def test_active_version_substituted(store):
    """Untagged assets use the active version."""
    store.add_asset("welcome", "greeting", "Hi", version_tag="v1", status="inactive")
    store.add_asset("welcome", "greeting", "Hello", version_tag="v2", status="active")
    store.add_asset("welcome", "greeting", "Hey", version_tag="v3", status="draft")

    result = await AssetResolver(store).resolve("{{asset:greeting}}, world", PROJECT, "welcome")

    assert result.text == "Hello, world"
    assert result.unresolved == []
    assert len(result.assets) == 1
    asset = result.assets[0]
    assert asset.key == "greeting"
    assert asset.placeholder == "{{asset:greeting}}"
    assert asset.version_tag == "v2"
    assert asset.language_source is LanguageSource.BASE


@pytest.mark.asyncio
async def test_tagged_version_substituted(store):
    """An explicit tag selects that version, even if it is not active."""
    store.add_asset("welcome", "greeting", "Hi", version_tag="v1", status="inactive")
    store.add_asset("welcome", "greeting", "Hello", version_tag="v2", status="active")

    result = await AssetResolver(store).resolve(
        "{{asset:greeting:v1}} / {{asset:greeting}}", PROJECT, "welcome"
    )

    assert result.text == "Hi / Hello"
    assert [a.version_tag for a in result.assets] == ["v1", "v2"]


@pytest.mark.asyncio
async def test_missing_tagged_version_raises(store):
    """A tagged version that does not exist is fatal."""
    store.add_asset("welcome", "greeting", "Hello")

    with pytest.raises(AssetVersionNotFoundError):
        await AssetResolver(store).resolve("{{asset:greeting:v9}}", PROJECT, "welcome")


@pytest.mark.asyncio
async def test_missing_asset_is_unresolved(store):
    """A missing asset leaves its placeholder and is reported."""
    result = await AssetResolver(store).resolve("Logo: {{asset:logo}}", PROJECT, "welcome")

    assert result.text == "Logo: {{asset:logo}}"
    assert result.unresolved == ["{{asset:logo}}"]
    assert result.assets == []


@pytest.mark.asyncio
async def test_asset_without_versions_is_unresolved(store):
    """An asset with no versions behaves like a missing one."""
    store.add_asset("welcome", "logo")

    result = await AssetResolver(store).resolve("{{asset:logo}}", PROJECT, "welcome")

    assert result.text == "{{asset:logo}}"
    assert result.unresolved == ["{{asset:logo}}"]


@pytest.mark.asyncio
async def test_tagged_placeholder_of_asset_without_versions_raises(store):
    """An explicit tag is fatal even when the asset has no versions at all."""
    store.add_asset("page", "logo")

    with pytest.raises(AssetVersionNotFoundError):
        await AssetResolver(store).resolve("x {{asset:logo:v2}}", PROJECT, "page")


@pytest.mark.asyncio
async def test_unresolved_warnings_name_the_cause(store, caplog):
    """Missing assets and versionless assets log different warnings."""
    store.add_asset("welcome", "logo")

    with caplog.at_level(logging.WARNING, logger="app.domain.prompts.assets"):
        result = await AssetResolver(store).resolve(
            "{{asset:logo}} {{asset:banner}}", PROJECT, "welcome"
        )

    assert result.unresolved == ["{{asset:logo}}", "{{asset:banner}}"]
    messages = [r.getMessage() for r in caplog.records]
    assert messages == [
        "Asset has no versions, leaving placeholder untouched",
        "Asset not found, leaving placeholder untouched",
    ]


@pytest.mark.asyncio
async def test_assets_scoped_to_prompt(store):
    """Assets of another prompt are not visible."""
    store.add_asset("other", "greeting", "Hello")

    result = await AssetResolver(store).resolve("{{asset:greeting}}", PROJECT, "welcome")

    assert result.unresolved == ["{{asset:greeting}}"]


@pytest.mark.asyncio
async def test_translation_used(store):
    """A translation for the requested language replaces the base value."""
    version = store.add_asset("welcome", "greeting", "Hello")
    store.add_asset_translation(version, "es", "Hola")

    result = await AssetResolver(store).resolve("{{asset:greeting}}", PROJECT, "welcome", "es")

    assert result.text == "Hola"
    assert result.assets[0].language_source is LanguageSource.EXACT


@pytest.mark.asyncio
async def test_missing_translation_falls_back(store):
    """Without a translation the base value is used and marked as a fallback."""
    store.add_asset("welcome", "greeting", "Hello")

    result = await AssetResolver(store).resolve("{{asset:greeting}}", PROJECT, "welcome", "fr")

    assert result.text == "Hello"
    assert result.assets[0].language_source is LanguageSource.BASE_FALLBACK
    assert result.unresolved == []


@pytest.mark.asyncio
async def test_repeated_placeholder_looked_up_once(store):
    """Repeated placeholders are all replaced but recorded and fetched once."""
    store.add_asset("welcome", "name", "Acme")

    result = await AssetResolver(store).resolve(
        "{{asset:name}} loves {{asset:name}}", PROJECT, "welcome"
    )

    assert result.text == "Acme loves Acme"
    assert len(result.assets) == 1
    assert [c for c in store.calls if c[0] == "get_asset"] == [
        ("get_asset", PROJECT, "welcome", "name")
    ]


@pytest.mark.asyncio
async def test_no_asset_placeholders_skips_store(store):
    """Text without asset placeholders never touches the store."""
    result = await AssetResolver(store).resolve("Plain {{name}}", PROJECT, "welcome")

    assert result.text == "Plain {{name}}"
    assert store.calls == []
