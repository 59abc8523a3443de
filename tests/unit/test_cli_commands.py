"""Unit tests for CLI commands with a mocked formatting service."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from fantomas_client.domain.exceptions import NoCompatibleVersionFound
from fantomas_client.domain.messages import FormatSelectionRange, LineEnding
from fantomas_client.domain.responses import FormattingResponse
from fantomas_client.entrypoints.cli import cli
from fantomas_client.shared.config_io import LOCAL_CONFIG_NAME
from tests.helpers import (
    EXIT_USAGE,
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "Program.fs"
    path.write_text("let x  = 1\n")
    return path


@pytest.fixture
def service():
    """Patch service creation and yield the mock service."""
    mock_service = MagicMock()
    mock_service.__enter__.return_value = mock_service
    with patch(
        "fantomas_client.entrypoints.cli._create_service", return_value=mock_service
    ) as create:
        mock_service.create = create
        yield mock_service


class TestFormatCommand:
    """Tests for `fantomas-client format`."""

    def test_prints_formatted_text(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.formatted(
            str(source_file), "let x = 1\n"
        )

        result = runner.invoke(cli, ["format", str(source_file)])

        assert_command_success(result)
        assert result.output == "let x = 1\n"
        service.format_document.assert_called_once_with(str(source_file), "let x  = 1\n", None)
        service.__exit__.assert_called_once()

    def test_write_rewrites_file(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.formatted(
            str(source_file), "let x = 1\n"
        )

        result = runner.invoke(cli, ["format", "--write", str(source_file)])

        assert_command_success(result)
        assert source_file.read_text() == "let x = 1\n"
        assert_output_contains(result, "Formatted")

    def test_check_fails_when_reformat_needed(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.formatted(
            str(source_file), "let x = 1\n"
        )

        result = runner.invoke(cli, ["format", "--check", str(source_file)])

        assert_command_failed(result)
        assert_output_contains(result, "would be reformatted")
        assert source_file.read_text() == "let x  = 1\n"

    def test_check_passes_when_unchanged(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.unchanged(str(source_file))

        result = runner.invoke(cli, ["format", "--check", str(source_file)])

        assert_command_success(result)

    def test_unchanged_prints_source(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.unchanged(str(source_file))

        result = runner.invoke(cli, ["format", str(source_file)])

        assert result.output == "let x  = 1\n"

    def test_write_and_check_conflict(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        result = runner.invoke(cli, ["format", "--write", "--check", str(source_file)])

        assert_command_failed(result)
        service.format_document.assert_not_called()

    def test_end_of_line_option(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.unchanged(str(source_file))

        runner.invoke(cli, ["format", "--end-of-line", "crlf", str(source_file)])

        assert service.format_document.call_args.args[2] is LineEnding.CRLF

    def test_relative_path_is_made_absolute(
        self,
        runner: CliRunner,
        service: MagicMock,
        source_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(source_file.parent)
        service.format_document.return_value = FormattingResponse.unchanged(str(source_file))

        runner.invoke(cli, ["format", "Program.fs"])

        sent = Path(service.format_document.call_args.args[0])
        assert sent.is_absolute()
        assert sent.resolve() == source_file.resolve()
        assert service.create.call_args.args[0].resolve() == source_file.parent.resolve()

    def test_formatting_error_is_reported(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.formatting_error(
            str(source_file), "Parsing failed at line 1"
        )

        result = runner.invoke(cli, ["format", str(source_file)])

        assert_command_failed(result)
        assert_output_contains(result, "could not be formatted", "Parsing failed at line 1")

    def test_tool_not_found_has_install_hint(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_document.return_value = FormattingResponse.tool_not_found(str(source_file))

        result = runner.invoke(cli, ["format", str(source_file)])

        assert_command_failed(result)
        assert_error_message(result, hint="dotnet tool install")

    def test_missing_file_is_rejected_by_click(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["format", str(tmp_path / "Missing.fs")])

        assert_command_failed(result, expected_code=EXIT_USAGE)


class TestFormatSelectionCommand:
    """Tests for `fantomas-client format-selection`."""

    def test_prints_fragment(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.format_selection.return_value = FormattingResponse.formatted(
            str(source_file), "x = 1"
        )

        result = runner.invoke(cli, ["format-selection", str(source_file), "1", "4", "1", "10"])

        assert_command_success(result)
        assert result.output == "x = 1"
        assert service.format_selection.call_args.args[2] == FormatSelectionRange(1, 4, 1, 10)

    def test_invalid_range_is_reported(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        result = runner.invoke(cli, ["format-selection", str(source_file), "3", "0", "1", "0"])

        assert_command_failed(result)
        assert_output_contains(result, "before its start")
        service.format_selection.assert_not_called()


class TestReportCommands:
    """Tests for `version` and `configuration`."""

    def test_version(self, runner: CliRunner, service: MagicMock, source_file: Path) -> None:
        service.get_version.return_value = FormattingResponse.version_report(
            str(source_file), "5.2.0"
        )

        result = runner.invoke(cli, ["version", str(source_file)])

        assert_command_success(result)
        assert result.output.strip() == "5.2.0"

    def test_version_launch_failure(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.get_version.return_value = FormattingResponse.daemon_launch_failed(
            str(source_file), "exit code 2"
        )

        result = runner.invoke(cli, ["version", str(source_file)])

        assert_command_failed(result)
        assert_output_contains(result, "could not be started", "exit code 2")

    def test_configuration(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.get_configuration.return_value = FormattingResponse.configuration(
            str(source_file), "indent_size=4"
        )

        result = runner.invoke(cli, ["configuration", str(source_file)])

        assert_command_success(result)
        assert_output_contains(result, "indent_size=4")

    def test_domain_errors_become_cli_errors(
        self, runner: CliRunner, service: MagicMock, source_file: Path
    ) -> None:
        service.get_version.side_effect = NoCompatibleVersionFound(str(source_file.parent))

        result = runner.invoke(cli, ["version", str(source_file)])

        assert_command_failed(result)
        assert_error_message(result, hint="dotnet tool install")


class TestConfigCommands:
    """Tests for `fantomas-client config`."""

    def test_init_writes_local_file(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["config", "init"])

        assert_command_success(result)
        assert "[daemon]" in (tmp_path / LOCAL_CONFIG_NAME).read_text()

    def test_init_refuses_to_overwrite(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / LOCAL_CONFIG_NAME).write_text("# mine\n")

        result = runner.invoke(cli, ["config", "init"])

        assert_command_failed(result)
        assert_error_message(result, hint="--force")
        assert (tmp_path / LOCAL_CONFIG_NAME).read_text() == "# mine\n"

    def test_init_force_overwrites(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / LOCAL_CONFIG_NAME).write_text("# mine\n")

        result = runner.invoke(cli, ["config", "init", "--force"])

        assert_command_success(result)
        assert "[tool]" in (tmp_path / LOCAL_CONFIG_NAME).read_text()

    def test_init_global(self, runner: CliRunner, isolated_global_config: Path) -> None:
        result = runner.invoke(cli, ["config", "init", "--global"])

        assert_command_success(result)
        assert isolated_global_config.exists()

    def test_path_lists_both_locations(
        self,
        runner: CliRunner,
        tmp_path: Path,
        isolated_global_config: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["config", "path"])

        assert_command_success(result)
        assert f"global:{isolated_global_config}" in result.output
        assert f"local:{tmp_path / LOCAL_CONFIG_NAME}" in result.output
