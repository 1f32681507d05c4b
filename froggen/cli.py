"""Command line arguments of the generator."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from froggen.config import Config, load_config

logger = logging.getLogger(__name__)

CACHE_FOLDER = "generate"

_TRACE = 5
_LEVELS = (logging.CRITICAL + 1, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG, _TRACE)
_DEFAULT_LEVEL = 2


@dataclass
class CliArgs:
    """The parsed command line."""

    config: Path
    dir: Path
    cache: Path | None = None
    redownload: bool = False
    verbose: int = 0
    quiet: int = 0

    @property
    def log_level(self) -> int:
        """The logging level chosen by the verbosity flags."""
        index = _DEFAULT_LEVEL + self.verbose - self.quiet
        return _LEVELS[max(0, min(index, len(_LEVELS) - 1))]


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="froggen", description="Generate code from version data.")
    parser.add_argument("-c", "--config", type=Path, required=True,
                        help="the path to the configuration file")
    parser.add_argument("--cache", type=Path, help="the path to the cache directory")
    parser.add_argument("-d", "--dir", type=Path, required=True,
                        help="the path to the root of the repository")
    parser.add_argument("-r", "--redownload", action="store_true",
                        help="whether to redownload all files")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="less output")
    return parser


def find_cache_dir(start: str | Path) -> Path | None:
    """The cache folder inside the nearest ``target`` directory at or above ``start``."""
    directory = Path(start).resolve()
    for candidate in (directory, *directory.parents):
        if (candidate / "target").is_dir():
            return candidate / "target" / CACHE_FOLDER
    return None


def parse_args(argv: Sequence[str] | None = None) -> tuple[CliArgs, Config]:
    """Parse the command line and the configuration file, and set up logging.

    Finds and creates the cache directory when none is given.
    """
    namespace = _parser().parse_args(argv)
    args = CliArgs(
        config=namespace.config,
        dir=namespace.dir,
        cache=namespace.cache,
        redownload=namespace.redownload,
        verbose=namespace.verbose,
        quiet=namespace.quiet,
    )
    logging.basicConfig(level=args.log_level)

    if args.cache is None:
        cache = find_cache_dir(Path.cwd())
        if cache is None:
            raise FileNotFoundError("Could not find cache directory")
        args.cache = cache
    args.cache.mkdir(parents=True, exist_ok=True)

    config = load_config(args.config)

    if args.log_level <= logging.DEBUG:
        logger.debug("%r", args)
        logger.debug("%r", config)

    return args, config