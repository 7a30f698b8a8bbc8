"""Unit tests for the scan command."""

import json
import os
from pathlib import Path

from reaper.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

OLD_EMPTY = os.path.join("data", "old_empty")
OLD_FILE = os.path.join("data", "old_with_young_content", "old_content")


class TestScanTable:
    """Tests for the default table output."""

    def test_lists_expired_entries(self, live_tree: Path) -> None:
        """Expired files and empty directories are listed."""
        result = runner.invoke(app, ["scan", "data", "--expiry", "10m"])

        assert result.exit_code == 0
        assert "Expired Entries" in result.stdout
        assert OLD_EMPTY in result.stdout
        assert OLD_FILE in result.stdout
        assert "new_content" not in result.stdout
        assert "new_empty" not in result.stdout
        assert "Found 2 expired entries (5 B total)" in result.stdout

    def test_scan_never_deletes(self, live_tree: Path) -> None:
        """Scanning leaves the tree untouched."""
        runner.invoke(app, ["scan", "data", "-e", "10m"])

        assert (live_tree / "old_empty").exists()
        assert (live_tree / "old_with_young_content" / "old_content").exists()

    def test_nothing_expired(self, live_tree: Path) -> None:
        """A long expiry finds nothing."""
        result = runner.invoke(app, ["scan", "data", "-e", "2h"])

        assert result.exit_code == 0
        assert "Nothing expired" in result.stdout

    def test_protect_pattern(self, live_tree: Path) -> None:
        """Protected paths are not listed."""
        result = runner.invoke(
            app, ["scan", "data", "-e", "10m", "--protect", "old_with_young_content/*"]
        )

        assert result.exit_code == 0
        assert OLD_EMPTY in result.stdout
        assert "old_content" not in result.stdout

    def test_protect_path_list(self, live_tree: Path) -> None:
        """Several patterns can be joined with the path separator."""
        patterns = os.pathsep.join(["old_empty", "old_with_young_content/*"])
        result = runner.invoke(app, ["scan", "data", "-e", "10m", "-p", patterns])

        assert result.exit_code == 0
        assert "Nothing expired" in result.stdout


class TestScanJson:
    """Tests for JSON output."""

    def test_json_output(self, live_tree: Path) -> None:
        """JSON output lists entries in walk order."""
        result = runner.invoke(app, ["scan", "data", "-e", "10m", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["path"] for item in data] == [OLD_EMPTY, OLD_FILE]
        assert data[0]["type"] == "directory"
        assert data[1]["type"] == "file"
        assert data[1]["size_bytes"] == 5
        assert set(data[1]) == {
            "path",
            "type",
            "size_bytes",
            "access_time",
            "mode",
            "owner_id",
            "group_id",
            "device_id",
        }

    def test_limit(self, live_tree: Path) -> None:
        """--limit stops the scan early."""
        result = runner.invoke(app, ["scan", "data", "-e", "10m", "-f", "json", "--limit", "1"])

        assert result.exit_code == 0
        assert [item["path"] for item in json.loads(result.stdout)] == [OLD_EMPTY]

    def test_empty_json(self, live_tree: Path) -> None:
        """No candidates renders an empty list."""
        result = runner.invoke(app, ["scan", "data", "-e", "2h", "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == []


class TestScanErrors:
    """Tests for scan error handling."""

    def test_missing_root(self, live_tree: Path) -> None:
        """A root that does not exist fails with exit code 1."""
        result = runner.invoke(app, ["scan", "missing", "-e", "10m"])

        assert result.exit_code == 1
        assert "Walk on missing failed" in result.output

    def test_missing_root_does_not_stop_others(self, live_tree: Path) -> None:
        """Other roots are still scanned."""
        result = runner.invoke(app, ["scan", "missing", "data", "-e", "10m"])

        assert result.exit_code == 1
        assert OLD_EMPTY in result.stdout

    def test_no_expiry(self, live_tree: Path) -> None:
        """Without --expiry or a settings file the command fails."""
        result = runner.invoke(app, ["scan", "data"])

        assert result.exit_code == 1
        assert "No expiry given" in result.output

    def test_invalid_expiry(self, live_tree: Path) -> None:
        """Unparseable durations are rejected."""
        result = runner.invoke(app, ["scan", "data", "-e", "soon"])

        assert result.exit_code == 1
        assert "Invalid duration" in result.output

    def test_oversized_expiry(self, live_tree: Path) -> None:
        """An expiry too large for a timedelta is a clean error."""
        result = runner.invoke(app, ["scan", "data", "-e", "99999999999d"])

        assert result.exit_code == 1
        assert "out of range" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_zero_expiry(self, live_tree: Path) -> None:
        """A zero expiry is rejected."""
        result = runner.invoke(app, ["scan", "data", "-e", "0s"])

        assert result.exit_code == 1
        assert "Invalid options" in result.output

    def test_malformed_pattern(self, live_tree: Path) -> None:
        """Malformed protection globs are rejected before scanning."""
        result = runner.invoke(app, ["scan", "data", "-e", "10m", "-p", "[oops"])

        assert result.exit_code == 1
        assert "Invalid options" in result.output


class TestScanConfig:
    """Tests for settings file integration."""

    def test_expiry_from_settings(self, live_tree: Path, tmp_path: Path) -> None:
        """The configured expiry applies when no flag is given."""
        settings = tmp_path / "settings.toml"
        settings.write_text('expiry = "10m"\nprotect = ["old_empty"]\n')

        result = runner.invoke(app, ["scan", "data", "-c", str(settings), "-f", "json"])

        assert result.exit_code == 0
        assert [item["path"] for item in json.loads(result.stdout)] == [OLD_FILE]

    def test_flag_overrides_settings(self, live_tree: Path, tmp_path: Path) -> None:
        """--expiry replaces the configured expiry."""
        settings = tmp_path / "settings.toml"
        settings.write_text('expiry = "10m"\n')

        result = runner.invoke(app, ["scan", "data", "-c", str(settings), "-e", "2h"])

        assert result.exit_code == 0
        assert "Nothing expired" in result.stdout

    def test_broken_settings(self, live_tree: Path, tmp_path: Path) -> None:
        """Invalid TOML aborts with exit code 1."""
        settings = tmp_path / "settings.toml"
        settings.write_text("expiry = \n")

        result = runner.invoke(app, ["scan", "data", "-c", str(settings)])

        assert result.exit_code == 1
        assert "Invalid TOML syntax" in result.output

    def test_default_settings_location(self, live_tree: Path, tmp_path: Path) -> None:
        """Settings are read from the XDG config directory by default."""
        config_dir = tmp_path / "config" / "reaper"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text('expiry = "10m"\n')

        result = runner.invoke(app, ["scan", "data", "-f", "json"])

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 2
