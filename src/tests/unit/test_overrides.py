"""Tests for the override resolver."""

import logging
from unittest.mock import AsyncMock

import pytest

from strata.errors import ParseError
from strata.overrides import OverrideResolver
from strata.result import Ok
from strata.storage import LocalFileStore, MemoryFileStore
from strata.types import PrecedenceLayer


@pytest.fixture
def resolver(ws_root, home_dir):
    """Resolver over the local filesystem."""
    return OverrideResolver(LocalFileStore(), ws_root, home_dir)


class TestResolve:
    """Tests for OverrideResolver.resolve()."""

    @pytest.mark.asyncio
    async def test_no_override_files(self, resolver):
        """Absence of overrides is an empty config, not an error."""
        assert await resolver.resolve() == Ok({})

    @pytest.mark.asyncio
    async def test_home_only(self, resolver, home_override_path, write_yaml):
        write_yaml(home_override_path, {"workspace": {"vaults": [{"fsPath": "foo"}]}})

        result = await resolver.resolve()

        assert result == Ok({"workspace": {"vaults": [{"fsPath": "foo"}]}})

    @pytest.mark.asyncio
    async def test_workspace_beats_home(
        self, resolver, ws_override_path, home_override_path, write_yaml
    ):
        """The workspace value of a field wins whole, lists included."""
        write_yaml(home_override_path, {"workspace": {"vaults": [{"fsPath": "foo"}]}})
        write_yaml(ws_override_path, {"workspace": {"vaults": [{"fsPath": "bar"}]}})

        result = await resolver.resolve()

        assert result.unwrap()["workspace"]["vaults"] == [{"fsPath": "bar"}]

    @pytest.mark.asyncio
    async def test_layers_merge_per_field(
        self, resolver, ws_override_path, home_override_path, write_yaml
    ):
        write_yaml(
            home_override_path,
            {"workspace": {"enableSmartRefs": True, "maxPreviewsCached": 3}},
        )
        write_yaml(
            ws_override_path,
            {"workspace": {"maxPreviewsCached": 0}, "preview": {"enableKatex": False}},
        )

        result = await resolver.resolve()

        assert result.unwrap() == {
            "workspace": {"enableSmartRefs": True, "maxPreviewsCached": 0},
            "preview": {"enableKatex": False},
        }

    @pytest.mark.asyncio
    async def test_malformed_workspace_override(
        self, resolver, ws_override_path, home_override_path, write_yaml
    ):
        """A malformed layer is reported with its path."""
        write_yaml(home_override_path, {"version": 5})
        ws_override_path.write_text("workspace: [oops\n")

        error = (await resolver.resolve()).unwrap_err()

        assert isinstance(error, ParseError)
        assert str(ws_override_path) in error.message

    @pytest.mark.asyncio
    async def test_both_layers_attempted_when_one_is_malformed(
        self, resolver, ws_override_path, home_override_path, caplog
    ):
        """Each layer is read even when a higher one fails."""
        ws_override_path.write_text("workspace: [oops\n")
        home_override_path.write_text("- also\n- bad\n")
        caplog.set_level(logging.ERROR)

        error = (await resolver.resolve()).unwrap_err()

        assert str(ws_override_path) in error.message
        assert str(home_override_path) in caplog.text

    @pytest.mark.asyncio
    async def test_unreadable_layer_is_absent(self, caplog):
        """A layer whose read fails is skipped with a warning."""
        files = MemoryFileStore({"/home/user/stratarc.yml": "version: 4\n"})
        files.read_text = AsyncMock(side_effect=PermissionError("denied"))
        resolver = OverrideResolver(files, "/ws", "/home/user")
        caplog.set_level(logging.WARNING, logger="strata.overrides")

        result = await resolver.resolve()

        assert result == Ok({})
        assert "Ignoring unreadable home override" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_utf8_layer_is_parse_error(
        self, resolver, ws_override_path, home_override_path, write_yaml
    ):
        """Undecodable bytes fail the layer instead of raising."""
        write_yaml(home_override_path, {"version": 5})
        ws_override_path.write_bytes(b"workspace: \xff\n")

        layers = await resolver.resolve_layers()
        error = (await resolver.resolve()).unwrap_err()

        assert layers[PrecedenceLayer.HOME] == Ok({"version": 5})
        assert isinstance(error, ParseError)
        assert str(ws_override_path) in error.message
        assert "not valid UTF-8" in error.message


class TestResolveLayers:
    """Tests for OverrideResolver.resolve_layers()."""

    @pytest.mark.asyncio
    async def test_layers_in_precedence_order(
        self, resolver, home_override_path, write_yaml
    ):
        write_yaml(home_override_path, {"version": 4})

        layers = await resolver.resolve_layers()

        assert list(layers) == [PrecedenceLayer.WORKSPACE, PrecedenceLayer.HOME]
        assert layers[PrecedenceLayer.WORKSPACE] == Ok(None)
        assert layers[PrecedenceLayer.HOME] == Ok({"version": 4})

    def test_locations(self, resolver, ws_override_path, home_override_path):
        assert resolver.locations[PrecedenceLayer.WORKSPACE].path == ws_override_path
        assert resolver.locations[PrecedenceLayer.HOME].path == home_override_path
