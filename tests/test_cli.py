"""Smoke tests for the CLI."""

import io
import json
import urllib.error
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from meridian.cli import app
from meridian.generate.services import GenerationError


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every command from an empty directory with no ambient config."""
    for var in (
        "MERIDIAN_ENTRIES_DIR",
        "MERIDIAN_OUTPUT_DIR",
        "MERIDIAN_MODEL",
        "MERIDIAN_PORT",
        "MERIDIAN_SPEECH_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    with patch("meridian.config.GLOBAL_CONFIG_PATH", tmp_path / "no-global.toml"):
        yield


@pytest.fixture
def entries_dir(tmp_path: Path) -> Path:
    """Directory with two entry files."""
    directory = tmp_path / "entries"
    directory.mkdir()
    entries = [
        {
            "date": "2024-02-01",
            "title": "The First Light",
            "subtitle": "On beginnings",
            "body": "Opening **line**.\n---\n> a quote",
            "tags": ["origins"],
            "mood": "hopeful",
        },
        {"date": "2024-02-02", "title": "Second Day", "body": "More words here."},
    ]
    for entry in entries:
        (directory / f"{entry['date']}.json").write_text(json.dumps(entry), encoding="utf-8")
    return directory


class TestCLI:
    """Tests for the CLI entry point."""

    def test_main_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("generate", "build", "list", "show", "listen", "serve"):
            assert command in result.output

    def test_main_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "meridian 0.1.0" in result.output


class TestListCommand:
    def test_lists_entries(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(app, ["list", "--entries", str(entries_dir)])
        assert result.exit_code == 0
        assert "2024-02-02" in result.output
        assert "The First Light" in result.output
        assert result.output.index("2024-02-02") < result.output.index("2024-02-01")

    def test_no_entries(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["list", "--entries", str(tmp_path / "missing")])
        assert result.exit_code == 0
        assert "No entries found" in result.output

    def test_entries_dir_from_config_file(
        self, runner: CliRunner, entries_dir: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "site.toml"
        config.write_text(f'[site]\nentries_dir = "{entries_dir.as_posix()}"\n')
        result = runner.invoke(app, ["--config", str(config), "list"])
        assert result.exit_code == 0
        assert "Second Day" in result.output


class TestShowCommand:
    def test_renders_blocks(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(app, ["show", "2024-02-01", "--entries", str(entries_dir)])
        assert result.exit_code == 0
        assert "FEBRUARY 1, 2024" in result.output
        assert "The First Light" in result.output
        assert "Opening line." in result.output
        assert "> a quote" in result.output
        assert "**" not in result.output

    def test_speech_script(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(
            app, ["show", "2024-02-01", "--speech", "--entries", str(entries_dir)]
        )
        assert result.exit_code == 0
        assert "The First Light. On beginnings. Opening line." in result.output
        assert "This has been Meridian." in result.output

    def test_missing_entry(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(app, ["show", "2023-01-01", "--entries", str(entries_dir)])
        assert result.exit_code == 1
        assert "This day has not been written yet" in result.output


class TestBuildCommand:
    def test_builds_site(self, runner: CliRunner, entries_dir: Path, tmp_path: Path) -> None:
        output = tmp_path / "out"
        result = runner.invoke(
            app, ["build", "--entries", str(entries_dir), "--output", str(output)]
        )
        assert result.exit_code == 0
        assert "Site built!" in result.output
        assert "Entries: 2" in result.output
        assert (output / "index.html").exists()
        assert (output / "entry" / "2024-02-01" / "index.html").exists()


class TestGenerateCommand:
    @patch("meridian.shared.llm.anthropic.Anthropic")
    def test_writes_entry(
        self,
        mock_cls: MagicMock,
        runner: CliRunner,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        reply = {"date": "2024-03-01", "title": "Signal", "body": "Words.", "mood": "wary"}
        mock_cls.return_value.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="text", text=json.dumps(reply))]
        )
        entries = tmp_path / "entries"

        result = runner.invoke(
            app, ["generate", "--date", "2024-03-01", "--entries", str(entries)]
        )

        assert result.exit_code == 0
        assert "Entry written" in result.output
        data = json.loads((entries / "2024-03-01.json").read_text(encoding="utf-8"))
        assert data["title"] == "Signal"

    def test_existing_entry(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(
            app, ["generate", "--date", "2024-02-01", "--entries", str(entries_dir)]
        )
        assert result.exit_code == 0
        assert "Nothing to do" in result.output

    def test_failure_exits_nonzero(self, runner: CliRunner, tmp_path: Path) -> None:
        with patch(
            "meridian.generate.services.generate_entry",
            side_effect=GenerationError("Missing required field: body"),
        ):
            result = runner.invoke(app, ["generate", "--entries", str(tmp_path / "e")])
        assert result.exit_code == 1

    def test_invalid_date(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["generate", "--date", "March 1"])
        assert result.exit_code == 1
        assert "Invalid date format" in result.output


def _audio_response(data: bytes) -> MagicMock:
    resp = MagicMock()
    resp.read.return_value = data
    resp.__enter__.return_value = resp
    return resp


class TestListenCommand:
    @patch("meridian.playback.client.urllib.request.urlopen")
    def test_saves_audio(
        self, mock_urlopen: MagicMock, runner: CliRunner, entries_dir: Path, tmp_path: Path
    ) -> None:
        mock_urlopen.return_value = _audio_response(b"ID3-audio")
        output = tmp_path / "audio" / "first.mp3"

        result = runner.invoke(
            app, ["listen", "2024-02-01", "--output", str(output), "--entries", str(entries_dir)]
        )

        assert result.exit_code == 0
        assert "Audio written" in result.output
        assert output.read_bytes() == b"ID3-audio"
        req = mock_urlopen.call_args[0][0]
        assert req.full_url == "http://127.0.0.1:8000/api/tts"
        text = json.loads(req.data)["text"]
        assert text.startswith("The First Light. On beginnings. Opening line.")
        assert text.endswith("This has been Meridian.")

    @patch("meridian.playback.client.urllib.request.urlopen")
    def test_endpoint_from_env(
        self,
        mock_urlopen: MagicMock,
        runner: CliRunner,
        entries_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("MERIDIAN_SPEECH_URL", "http://diary.example.test/api/tts")
        mock_urlopen.return_value = _audio_response(b"ID3")

        result = runner.invoke(app, ["listen", "2024-02-02", "--entries", str(entries_dir)])

        assert result.exit_code == 0
        assert mock_urlopen.call_args[0][0].full_url == "http://diary.example.test/api/tts"
        assert Path("meridian-2024-02-02.mp3").read_bytes() == b"ID3"

    @patch("meridian.playback.client.urllib.request.urlopen")
    def test_url_option(
        self, mock_urlopen: MagicMock, runner: CliRunner, entries_dir: Path
    ) -> None:
        mock_urlopen.return_value = _audio_response(b"ID3")
        result = runner.invoke(
            app,
            ["listen", "2024-02-02", "--url", "http://other.test/tts", "--entries", str(entries_dir)],
        )
        assert result.exit_code == 0
        assert mock_urlopen.call_args[0][0].full_url == "http://other.test/tts"

    @patch("meridian.playback.client.urllib.request.urlopen")
    def test_endpoint_failure_exits_nonzero(
        self, mock_urlopen: MagicMock, runner: CliRunner, entries_dir: Path, tmp_path: Path
    ) -> None:
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "http://127.0.0.1:8000/api/tts", 500, "Server Error", {}, io.BytesIO(b"{}")
        )
        output = tmp_path / "never.mp3"

        result = runner.invoke(
            app, ["listen", "2024-02-01", "--output", str(output), "--entries", str(entries_dir)]
        )

        assert result.exit_code == 1
        assert not output.exists()

    def test_missing_entry(self, runner: CliRunner, entries_dir: Path) -> None:
        result = runner.invoke(app, ["listen", "2023-01-01", "--entries", str(entries_dir)])
        assert result.exit_code == 1
        assert "This day has not been written yet" in result.output


class TestServeCommand:
    @patch("uvicorn.run")
    def test_runs_app(self, mock_run: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(app, ["serve", "--port", "9001"])
        assert result.exit_code == 0
        _args, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001
