"""Shared test fixtures for drlogseeker tests."""

import os
from pathlib import Path

import pytest

ENGLISH_REPORT = """\
foo_dr_meter 1.1.1 from 15. March 2016

log date: 2016-03-15 21:10:47

--------------------------------------------------------------------------------
Analyzed: Artist / Album
--------------------------------------------------------------------------------

DR         Peak         RMS     Duration Track
--------------------------------------------------------------------------------
DR9      -0.10 dB   -12.84 dB      3:58 01-Intro
DR10     -0.03 dB   -13.42 dB      4:11 02-Song
--------------------------------------------------------------------------------

Number of tracks:  2
Official DR value: {value}

Samplerate:        44100 Hz
Channels:          2
Bits per sample:   16
================================================================================
"""

RUSSIAN_REPORT = """\
Анализ: Исполнитель / Альбом

DR         Пик          RMS     Длительность Трек
DR9      -0.10 dB   -12.84 dB      3:58 01-Вступление

Количество треков:  1
Реальное значение DR: {value}

Частота:           44100 Гц
"""


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def english_report(value="9") -> str:
    return ENGLISH_REPORT.format(value=value)


def russian_report(value="9") -> str:
    return RUSSIAN_REPORT.format(value=value)


def write_file(path: Path, content="", encoding="utf-8") -> Path:
    """Write ``content`` to ``path``, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding=encoding)
    return path


running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0

skip_if_root = pytest.mark.skipif(
    running_as_root, reason="permission checks are bypassed for root"
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep user config files and DRLOG_* variables out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in list(os.environ):
        if key.startswith("DRLOG_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def library(tmp_path):
    """A small music library with logs in both dialects and some noise.

    Layout:
        Artist A/2001 - Loud/foo_dr.txt       DR 6
        Artist A/2005 - Quiet/dr.log          DR 12
        Artist B/Album/Значение.txt           Russian, DR 9.6 -> 10
        Artist B/Album/cover.jpg              not a candidate
        Artist C/Broken/empty.txt             empty
        Artist C/Broken/notes.txt             no marker
        Artist C/Broken/mixed.log             DR 7 and DR 12
    """
    root = tmp_path / "library"
    write_file(root / "Artist A" / "2001 - Loud" / "foo_dr.txt", english_report("6"))
    write_file(root / "Artist A" / "2005 - Quiet" / "dr.log", english_report("12"))
    write_file(root / "Artist B" / "Album" / "Значение.txt", russian_report("9.6"))
    write_file(root / "Artist B" / "Album" / "cover.jpg", b"\xff\xd8\xff\xe0")
    write_file(root / "Artist C" / "Broken" / "empty.txt", "")
    write_file(root / "Artist C" / "Broken" / "notes.txt", "ripped with EAC\nno problems\n")
    write_file(root / "Artist C" / "Broken" / "mixed.log", "DR: 7\nsome text\nDR: 12\n")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Factory building ``count`` English logs with DR values cycling 0..14."""

    def _make(count: int, per_dir: int = 10, name: str = "tree") -> Path:
        root = tmp_path / name
        for i in range(count):
            folder = root / f"album{i // per_dir:04d}"
            write_file(folder / f"log{i:05d}.txt", english_report(str(i % 15)))
        return root

    return _make


@pytest.fixture
def deny_listing(monkeypatch):
    """Make os.scandir fail with EACCES for directories with the given names."""
    real_scandir = os.scandir
    denied = set()

    def scandir(path="."):
        if Path(path).name in denied:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr("drlogseeker.scanning.discovery.os.scandir", scandir)
    return denied.update


@pytest.fixture
def deny_reading(monkeypatch):
    """Make file_ops reads fail with EACCES for files with the given names."""
    import builtins

    real_open = builtins.open
    denied = set()

    def fake_open(file, *args, **kwargs):
        if Path(file).name in denied:
            raise PermissionError(13, "Permission denied", str(file))
        return real_open(file, *args, **kwargs)

    monkeypatch.setattr("drlogseeker.file_ops.open", fake_open, raising=False)
    return denied.update
