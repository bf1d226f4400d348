"""Tests for nested prompt references, cycles and depth limits."""

import asyncio
import logging

import pytest

from app.domain.prompts.errors import (
    CircularReferenceError,
    MaxDepthExceededError,
    PromptNotFoundError,
    VersionNotFoundError,
)
from app.domain.prompts.resolver import PromptResolver
from app.domain.prompts.types import FallbackKind

PROJECT = "acme"


def _chain(store, length: int) -> None:
    """Add prompts c0 -> c1 -> ... -> c<length-1>."""
    for i in range(length):
        text = f"c{i} {{{{prompt:c{i + 1}}}}}" if i < length - 1 else f"c{i} end"
        store.add_prompt(f"c{i}", text)


class TestNestedReferences:
    """Test expansion of prompt references."""

    @pytest.mark.asyncio
    async def test_nested_chain_resolves(self, store):
        """Scenario: main -> ref1 -> ref2 flattens into one string."""
        store.add_prompt("main", "Main {{prompt:ref1}}")
        store.add_prompt("ref1", "R1 {{prompt:ref2}}")
        store.add_prompt("ref2", "R2 end")

        result = await PromptResolver(store).resolve(PROJECT, "main")

        assert result.text == "Main R1 R2 end"
        prompts = result.metadata.prompts
        assert [(p.prompt_key, p.depth) for p in prompts] == [("ref1", 1), ("ref2", 2)]
        assert prompts[0].placeholder == "{{prompt:ref1}}"
        assert prompts[0].requested_version_tag == "latest"
        assert prompts[0].fallback is FallbackKind.BASE

    @pytest.mark.asyncio
    async def test_sibling_references_are_not_cycles(self, store):
        """The same prompt referenced twice side by side is fine."""
        store.add_prompt("page", "{{prompt:footer}} | {{prompt:footer}}")
        store.add_prompt("footer", "F")

        result = await PromptResolver(store).resolve(PROJECT, "page")

        assert result.text == "F | F"
        assert len(result.metadata.prompts) == 2

    @pytest.mark.asyncio
    async def test_explicit_version_tag(self, store):
        """A tagged reference selects that version of the target."""
        store.add_prompt("page", "{{prompt:footer:v1}}")
        store.add_prompt("footer", "old", version_tag="v1", status="inactive")
        store.add_version("footer", "v2", "new", status="active")

        result = await PromptResolver(store).resolve(PROJECT, "page")

        assert result.text == "old"
        ref = result.metadata.prompts[0]
        assert ref.requested_version_tag == "v1"
        assert ref.version_tag == "v1"

    @pytest.mark.asyncio
    async def test_cross_project_reference(self, store):
        """A qualified reference resolves in the named project."""
        store.add_prompt("page", "Body. {{prompt:shared/footer}}")
        store.add_prompt("footer", "Shared {{asset:sig}}", project_id="shared")
        store.add_asset("footer", "sig", "-- Team", project_id="shared")

        result = await PromptResolver(store).resolve(PROJECT, "page")

        assert result.text == "Body. Shared -- Team"
        assert result.metadata.prompts[0].project_id == "shared"

    @pytest.mark.asyncio
    async def test_same_key_in_other_project_is_not_a_cycle(self, store):
        """Cycle detection keys on project and prompt together."""
        store.add_prompt("intro", "A {{prompt:other/intro}}")
        store.add_prompt("intro", "B", project_id="other")

        result = await PromptResolver(store).resolve(PROJECT, "intro")

        assert result.text == "A B"

    @pytest.mark.asyncio
    async def test_nested_prompts_share_variables_and_language(self, store):
        """Nested prompts see the caller's variables and language."""
        store.add_prompt("page", "{{prompt:greet}}")
        greet = store.add_prompt("greet", "Hi {{name}}")
        store.add_translation(greet, "es", "Hola {{name}}")

        result = await PromptResolver(store).resolve(
            PROJECT, "page", language_code="es", variables={"name": "Ana"}
        )

        assert result.text == "Hola Ana"
        ref = result.metadata.prompts[0]
        assert ref.language_code == "es"
        assert ref.fallback is FallbackKind.EXACT

    @pytest.mark.asyncio
    async def test_unresolved_lists_merge_from_nested(self, store):
        """Gaps found in nested prompts are reported at the top, once each."""
        store.add_prompt("page", "{{x}} {{prompt:part}}")
        store.add_prompt("part", "{{asset:logo}} {{x}}")

        result = await PromptResolver(store).resolve(PROJECT, "page")

        assert result.text == "{{x}} {{asset:logo}} {{x}}"
        assert result.metadata.unresolved_variables == ["x"]
        assert result.metadata.unresolved_assets == ["{{asset:logo}}"]

    @pytest.mark.asyncio
    async def test_concurrent_resolutions_are_independent(self, store):
        """Resolutions running side by side do not see each other's chains."""
        store.add_prompt("a", "A {{prompt:shared}}")
        store.add_prompt("b", "B {{prompt:shared}}")
        store.add_prompt("shared", "S")
        resolver = PromptResolver(store)

        first, second = await asyncio.gather(
            resolver.resolve(PROJECT, "a"), resolver.resolve(PROJECT, "b")
        )

        assert first.text == "A S"
        assert second.text == "B S"


class TestFatalReferences:
    """Test errors that abort the whole resolution."""

    @pytest.mark.asyncio
    async def test_self_reference_is_circular(self, store):
        """A prompt referencing itself is a cycle."""
        store.add_prompt("loop", "again {{prompt:loop}}")

        with pytest.raises(CircularReferenceError) as exc_info:
            await PromptResolver(store).resolve(PROJECT, "loop")

        assert exc_info.value.chain == ("acme/loop", "acme/loop")

    @pytest.mark.asyncio
    async def test_mutual_reference_is_circular(self, store):
        """Scenario: p1 -> p2 -> p1 raises with the offending chain."""
        store.add_prompt("p1", "{{prompt:p2}}")
        store.add_prompt("p2", "{{prompt:p1}}")

        with pytest.raises(CircularReferenceError) as exc_info:
            await PromptResolver(store).resolve(PROJECT, "p1")

        assert exc_info.value.chain == ("acme/p1", "acme/p2", "acme/p1")
        assert "acme/p1 -> acme/p2 -> acme/p1" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_deep_cycle_logged_once(self, store, caplog):
        """A cycle found several levels down is logged only where it is detected."""
        store.add_prompt("c0", "{{prompt:c1}}")
        store.add_prompt("c1", "{{prompt:c2}}")
        store.add_prompt("c2", "{{prompt:c3}}")
        store.add_prompt("c3", "{{prompt:c1}}")

        with caplog.at_level(logging.WARNING, logger="app.domain.prompts"):
            with pytest.raises(CircularReferenceError):
                await PromptResolver(store).resolve(PROJECT, "c0")

        records = [r for r in caplog.records if r.name.startswith("app.domain.prompts")]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR

    @pytest.mark.asyncio
    async def test_chain_of_max_depth_succeeds(self, store):
        """A chain as long as the depth limit resolves."""
        _chain(store, 5)

        result = await PromptResolver(store, max_depth=5).resolve(PROJECT, "c0")

        assert result.text == "c0 c1 c2 c3 c4 end"
        assert [p.depth for p in result.metadata.prompts] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_chain_past_max_depth_fails(self, store):
        """One more level than the limit raises."""
        _chain(store, 6)

        with pytest.raises(MaxDepthExceededError) as exc_info:
            await PromptResolver(store, max_depth=5).resolve(PROJECT, "c0")

        assert exc_info.value.max_depth == 5
        assert exc_info.value.prompt_key == "c5"

    @pytest.mark.asyncio
    async def test_depth_limit_is_checked_before_lookup(self, store):
        """The prompt past the limit is never fetched."""
        _chain(store, 3)

        with pytest.raises(MaxDepthExceededError):
            await PromptResolver(store, max_depth=2).resolve(PROJECT, "c0")

        fetched = [c[2] for c in store.calls if c[0] == "get_prompt_version"]
        assert fetched == ["c0", "c1"]

    @pytest.mark.asyncio
    async def test_missing_nested_prompt_aborts(self, store):
        """A missing referenced prompt propagates unchanged."""
        store.add_prompt("page", "ok {{prompt:missing}}")

        with pytest.raises(PromptNotFoundError) as exc_info:
            await PromptResolver(store).resolve(PROJECT, "page")

        assert exc_info.value.prompt_key == "missing"

    @pytest.mark.asyncio
    async def test_missing_nested_version_aborts(self, store):
        """A reference to a tag that does not exist propagates unchanged."""
        store.add_prompt("page", "{{prompt:footer:v9}}")
        store.add_prompt("footer", "F")

        with pytest.raises(VersionNotFoundError):
            await PromptResolver(store).resolve(PROJECT, "page")
