import importlib
import logging

import pytest

from mp4scan import cli, config
from mp4scan.scanner import FolderResult

from mp4_factory import write_mp4


@pytest.fixture
def library(tmp_path):
    write_mp4(tmp_path / "a.mp4", 10)
    write_mp4(tmp_path / "sub" / "b.mp4", 20)
    return tmp_path


def test_main_reports_totals(library, capsys):
    assert cli.main(["--no-color", str(library)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"\U0001F552 Scanning folder: {library}"
    assert "\U0001F44C Found 2 MP4 files in 2 folders." in out
    assert "\U0001F3C1 Total duration: 0:00:30" in out


def test_main_verbose(library, capsys, monkeypatch):
    monkeypatch.setattr(cli.config, "PATH_DISPLAY_WIDTH", 4096)

    assert cli.main(["--no-color", "-v", str(library)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert f"\U0001F7E1 0:00:20 {library / 'sub'}" in out
    assert f"\U0001F7E1 0:00:10 {library}" in out


def test_main_last_path_wins(library, tmp_path_factory, capsys):
    empty = tmp_path_factory.mktemp("empty")

    cli.main(["--no-color", str(empty), str(library)])

    assert "\U0001F44C Found 2 MP4 files in 2 folders." in capsys.readouterr().out


def test_main_flags_after_path(library, capsys):
    assert cli.main([str(library), "--no-color", "-v"]) == 0
    assert "\U0001F7E1" in capsys.readouterr().out


def test_main_defaults_to_cwd(library, capsys, monkeypatch):
    monkeypatch.chdir(library / "sub")

    assert cli.main(["--no-color"]) == 0

    out = capsys.readouterr().out
    assert f"Scanning folder: {library / 'sub'}" in out
    assert "Found 1 MP4 files in 1 folders." in out


def test_main_unresolvable_cwd(capsys, monkeypatch):
    def broken_getcwd():
        raise FileNotFoundError("cwd was removed")

    monkeypatch.setattr(cli.os, "getcwd", broken_getcwd)

    assert cli.main(["--no-color"]) == 1
    captured = capsys.readouterr()
    assert "Scanning folder" not in captured.out
    assert "Could not determine the folder to scan." in captured.err


def test_main_missing_root_is_not_an_error(tmp_path, capsys):
    assert cli.main(["--no-color", str(tmp_path / "nope")]) == 0

    out = capsys.readouterr().out
    assert "Found 0 MP4 files in 0 folders." in out
    assert "Total duration: 0:00:00" in out


def test_print_report_colors(capsys):
    result = FolderResult(files_found=3, folders_with_media=1, duration_seconds=61)

    cli.print_report(result, color=True)

    out = capsys.readouterr().out
    assert "\U0001F44C Found \033[33m3\033[0m MP4 files in \033[33m1\033[0m folders." in out
    assert "\U0001F3C1 Total duration: \033[33m0:01:01\033[0m" in out


def test_main_interrupted(library, capsys, monkeypatch):
    def interrupted_scan(path, options):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "scan", interrupted_scan)

    assert cli.main(["--no-color", str(library)]) == 130
    captured = capsys.readouterr()
    assert "Result:" not in captured.out
    assert "Scan interrupted." in captured.err


def test_main_log_level_flag(library, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)

    assert cli.main(["--no-color", "--log-level", "DEBUG", str(library)]) == 0
    assert root.level == logging.DEBUG


def test_log_level_env(monkeypatch):
    monkeypatch.setenv("MP4SCAN_LOG_LEVEL", "debug")
    assert config._get_log_level_env("MP4SCAN_LOG_LEVEL") == "DEBUG"

    # Unknown names don't break startup
    monkeypatch.setenv("MP4SCAN_LOG_LEVEL", "verbose")
    assert config._get_log_level_env("MP4SCAN_LOG_LEVEL") == "WARNING"

    monkeypatch.delenv("MP4SCAN_LOG_LEVEL")
    assert config._get_log_level_env("MP4SCAN_LOG_LEVEL") == "WARNING"


def test_config_reload_with_bad_log_level(monkeypatch):
    monkeypatch.setenv("MP4SCAN_LOG_LEVEL", "verbose")
    try:
        importlib.reload(config)
        assert config.LOG_LEVEL == "WARNING"
        logging.Logger("check").setLevel(config.LOG_LEVEL)
    finally:
        monkeypatch.delenv("MP4SCAN_LOG_LEVEL")
        importlib.reload(config)
