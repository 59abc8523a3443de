"""Unit tests for config file I/O."""

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from fantomas_client.domain.config import ClientConfig, ToolConfig
from fantomas_client.shared.config_io import (
    LOCAL_CONFIG_NAME,
    config_to_data,
    get_global_config_path,
    get_local_config_path,
    load_config_data,
    save_config,
)


class TestGetGlobalConfigPath:
    """Tests for global config location."""

    def test_uses_xdg_config_home(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": str(tmp_path)}), patch(
            "fantomas_client.shared.config_io.platform.system", return_value="Linux"
        ):
            assert get_global_config_path() == tmp_path / "fantomas-client" / "config.toml"

    def test_falls_back_to_dot_config(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": ""}), patch(
            "fantomas_client.shared.config_io.platform.system", return_value="Linux"
        ), patch("fantomas_client.shared.config_io.Path.home", return_value=tmp_path):
            assert (
                get_global_config_path()
                == tmp_path / ".config" / "fantomas-client" / "config.toml"
            )

    def test_uses_appdata_on_windows(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", {"APPDATA": str(tmp_path)}), patch(
            "fantomas_client.shared.config_io.platform.system", return_value="Windows"
        ):
            assert get_global_config_path() == tmp_path / "fantomas-client" / "config.toml"


class TestLoadConfigData:
    """Tests for reading TOML files."""

    def test_local_config_path(self, tmp_path: Path) -> None:
        assert get_local_config_path(tmp_path) == tmp_path / LOCAL_CONFIG_NAME

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config_data(tmp_path / "missing.toml")

    def test_malformed_toml_raises_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[daemon\nrequest_timeout = ")

        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_data(path)

    def test_reads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[format]\nend_of_line = "crlf"\n')

        assert load_config_data(path) == {"format": {"end_of_line": "crlf"}}


class TestSaveConfig:
    """Tests for writing TOML files."""

    def test_unset_values_are_omitted(self) -> None:
        data = config_to_data(ClientConfig.default())

        assert "dotnet_cli_path" not in data["tool"]
        assert data["daemon"]["request_timeout"] == 60.0

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "config.toml"

        save_config(ClientConfig.default(), path)

        assert path.exists()

    def test_saved_config_loads_back(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        config = ClientConfig(tool=ToolConfig(dotnet_cli_path="/opt/dotnet/dotnet"))

        save_config(config, path)

        with path.open("rb") as f:
            data = tomllib.load(f)
        assert ClientConfig.from_partial(ClientConfig.default(), data) == config
