"""Unit tests for tool discovery value objects."""

from pathlib import Path
from unittest.mock import patch

import pytest

from fantomas_client.domain.tooling import (
    MINIMUM_VERSION,
    Folder,
    GlobalTool,
    LocalTool,
    ResolvedTool,
    ToolOnPath,
    ToolVersion,
)


class TestFolder:
    """Tests for Folder."""

    def test_accepts_absolute_path(self, tmp_path: Path) -> None:
        folder = Folder(tmp_path)

        assert folder.path == tmp_path
        assert str(folder) == str(tmp_path)

    def test_rejects_relative_path(self) -> None:
        with pytest.raises(ValueError, match="absolute"):
            Folder(Path("src"))

    def test_for_file_strips_file_name(self, tmp_path: Path) -> None:
        """The folder of a file is its parent directory."""
        folder = Folder.for_file(tmp_path / "src" / "Program.fs")

        assert folder == Folder(tmp_path / "src")

    def test_equal_folders_share_hash(self, tmp_path: Path) -> None:
        """Folders are usable as cache keys."""
        cache = {Folder(tmp_path): "a"}

        assert cache[Folder(Path(str(tmp_path)))] == "a"


class TestToolVersion:
    """Tests for ToolVersion parsing and comparison."""

    def test_parse_plain_version(self) -> None:
        version = ToolVersion.parse("5.0.0")

        assert version.value.major == 5
        assert version.raw == "5.0.0"
        assert str(version) == "5.0.0"

    def test_parse_strips_v_prefix(self) -> None:
        """Fantomas prints versions like 'v5.0.0'."""
        version = ToolVersion.parse("v5.0.0")

        assert str(version) == "5.0.0"
        assert version.raw == "v5.0.0"

    def test_parse_prerelease(self) -> None:
        version = ToolVersion.parse("6.0.0-beta-001")

        assert version.value.prerelease == "beta-001"

    @pytest.mark.parametrize("text", ["", "five", "5.0", "5.0.0.1"])
    def test_parse_rejects_invalid_text(self, text: str) -> None:
        with pytest.raises(ValueError):
            ToolVersion.parse(text)

    def test_equality_ignores_raw_text(self) -> None:
        """Versions compare by semantic value, not by the reported text."""
        assert ToolVersion.parse("v5.0.0") == ToolVersion.parse("5.0.0")
        assert hash(ToolVersion.parse("v5.0.0")) == hash(ToolVersion.parse("5.0.0"))

    def test_different_versions_are_not_equal(self) -> None:
        assert ToolVersion.parse("5.0.0") != ToolVersion.parse("5.0.1")


class TestMinimumVersion:
    """Tests for the compatibility boundary."""

    def test_minimum_itself_is_compatible(self) -> None:
        assert ToolVersion.parse("4.6.0-alpha-004").is_compatible()

    def test_earlier_prerelease_is_incompatible(self) -> None:
        assert not ToolVersion.parse("4.6.0-alpha-003").is_compatible()

    def test_older_release_is_incompatible(self) -> None:
        assert not ToolVersion.parse("4.5.9").is_compatible()

    def test_final_release_after_prerelease_is_compatible(self) -> None:
        """4.6.0 is newer than any 4.6.0 prerelease."""
        assert ToolVersion.parse("4.6.0").is_compatible()

    def test_newer_major_is_compatible(self) -> None:
        assert ToolVersion.parse("6.3.1").is_compatible()

    def test_minimum_version_text(self) -> None:
        assert str(MINIMUM_VERSION) == "4.6.0-alpha-004"


class TestStartMethods:
    """Tests for start method variants."""

    def test_global_tool_executable_is_under_dotnet_tools(self, tmp_path: Path) -> None:
        with patch("fantomas_client.domain.tooling.Path.home", return_value=tmp_path), patch(
            "fantomas_client.domain.tooling.sys.platform", "linux"
        ):
            assert GlobalTool.executable() == tmp_path / ".dotnet" / "tools" / "fantomas"

    def test_global_tool_executable_on_windows(self, tmp_path: Path) -> None:
        with patch("fantomas_client.domain.tooling.Path.home", return_value=tmp_path), patch(
            "fantomas_client.domain.tooling.sys.platform", "win32"
        ):
            assert GlobalTool.executable().name == "fantomas.exe"

    def test_start_methods_compare_by_value(self, tmp_path: Path) -> None:
        assert LocalTool(Folder(tmp_path)) == LocalTool(Folder(tmp_path))
        assert GlobalTool() == GlobalTool()
        assert ToolOnPath(tmp_path / "fantomas") == ToolOnPath(tmp_path / "fantomas")

    def test_resolved_tool_is_immutable(self) -> None:
        resolved = ResolvedTool(version=ToolVersion.parse("5.0.0"), start_method=GlobalTool())

        with pytest.raises(AttributeError):
            resolved.version = ToolVersion.parse("6.0.0")  # type: ignore[misc]
