import logging

import pytest

from froggen.cli import CACHE_FOLDER, find_cache_dir, parse_args
from froggen.config import VersionTuple

CONFIG_TEXT = """
[[version]]
base = "1.21.1"
target = "1.21.1"
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TEXT)
    return path


def test_parse_args_reads_config_and_creates_cache(tmp_path, config_path):
    cache = tmp_path / "cache" / "nested"
    args, config = parse_args(
        ["-c", str(config_path), "--cache", str(cache), "-d", str(tmp_path), "-r"]
    )
    assert cache.is_dir()
    assert args.cache == cache
    assert args.redownload is True
    assert args.dir == tmp_path
    assert list(config) == [VersionTuple("1.21.1", "1.21.1")]


def test_default_level_is_warning(tmp_path, config_path):
    args, _ = parse_args(["-c", str(config_path), "--cache", str(tmp_path), "-d", str(tmp_path)])
    assert args.log_level == logging.WARNING
    assert args.redownload is False


def test_two_verbose_flags_give_debug(tmp_path, config_path):
    args, _ = parse_args(
        ["-c", str(config_path), "--cache", str(tmp_path), "-d", str(tmp_path), "-vv"]
    )
    assert args.log_level == logging.DEBUG


def test_verbosity_is_clamped(tmp_path, config_path):
    base = ["-c", str(config_path), "--cache", str(tmp_path), "-d", str(tmp_path)]
    loud, _ = parse_args([*base, "-vvvvvvv"])
    quiet, _ = parse_args([*base, "-qqqqq"])
    assert loud.log_level < logging.DEBUG
    assert quiet.log_level > logging.CRITICAL


def test_missing_required_argument_exits(config_path):
    with pytest.raises(SystemExit):
        parse_args(["-c", str(config_path)])


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_args(["-c", str(tmp_path / "absent.toml"), "--cache", str(tmp_path), "-d", str(tmp_path)])


def test_find_cache_dir_uses_nearest_target(tmp_path):
    (tmp_path / "target").mkdir()
    nested = tmp_path / "crates" / "inner"
    nested.mkdir(parents=True)
    assert find_cache_dir(nested) == tmp_path.resolve() / "target" / CACHE_FOLDER


def test_find_cache_dir_prefers_closer_target(tmp_path):
    (tmp_path / "target").mkdir()
    inner = tmp_path / "inner"
    (inner / "target").mkdir(parents=True)
    assert find_cache_dir(inner) == inner.resolve() / "target" / CACHE_FOLDER


def test_cache_found_from_working_directory(tmp_path, config_path, monkeypatch):
    (tmp_path / "target").mkdir()
    monkeypatch.chdir(tmp_path)
    args, _ = parse_args(["-c", str(config_path), "-d", str(tmp_path)])
    assert args.cache == tmp_path.resolve() / "target" / CACHE_FOLDER
    assert args.cache.is_dir()