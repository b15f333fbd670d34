"""Configuration loading from CLI args, env vars, and optional YAML file."""

import argparse
import logging
import os
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LINE_LENGTH = 80
RANDOM_MARKERS = ("rand", "random")


class ConfigError(Exception):
    """Raised when the generator cannot be configured and must not start."""


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class LengthSpec:
    """Either a fixed line length in bytes, or the random marker."""

    length: int | None = DEFAULT_LINE_LENGTH
    random: bool = False

    def __str__(self) -> str:
        return "random" if self.random else str(self.length)


def parse_length(value) -> LengthSpec:
    """Parse a line-length argument: a positive integer, or 'rand'/'random'."""
    if isinstance(value, LengthSpec):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        text = str(value)
    else:
        text = str(value).strip().lower()
    if text in RANDOM_MARKERS:
        return LengthSpec(length=None, random=True)
    try:
        length = int(text)
    except ValueError:
        raise ConfigError(f"bad length arg: {value}") from None
    if length <= 0:
        raise ConfigError(f"line length must be positive, got {length}")
    return LengthSpec(length=length)


@dataclass(frozen=True)
class Config:
    output_file: str = ""
    truncate: bool = False
    reopen: bool = False
    frequency: float = 10.0
    pidfile: str = ""
    ts_format: str = ""
    line_length: LengthSpec = field(default_factory=LengthSpec)
    dictionary: str = ""
    max_random_length: int = DEFAULT_LINE_LENGTH
    log_level: str = "INFO"

    @property
    def to_stdout(self) -> bool:
        return not self.output_file


# (field name, env var, converter)
_SOURCES = (
    ("output_file", "OUTPUT_FILE", str),
    ("truncate", "TRUNCATE", _parse_bool),
    ("reopen", "REOPEN", _parse_bool),
    ("frequency", "FREQUENCY", float),
    ("pidfile", "PIDFILE", str),
    ("ts_format", "TS_FORMAT", str),
    ("line_length", "LINE_LENGTH", parse_length),
    ("dictionary", "DICTIONARY", str),
    ("max_random_length", "MAX_RANDOM_LENGTH", int),
    ("log_level", "LOG_LEVEL", lambda v: str(v).strip().upper()),
)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randomizr",
        description="Write random log lines at a fixed rate to a file or stdout",
    )
    parser.add_argument(
        "--file", dest="output_file", default=None,
        help="destination file to which random data will be written (default: stdout)",
    )
    parser.add_argument(
        "--truncate", action="store_true", default=None,
        help="truncate file on opening instead of appending",
    )
    parser.add_argument(
        "--reopen", action="store_true", default=None,
        help="reopen file handle on every write instead of using a persistent handle",
    )
    parser.add_argument(
        "--freq", dest="frequency", type=float, default=None,
        help="frequency in hz at which lines will be written (default: 10)",
    )
    parser.add_argument(
        "--pidfile", default=None,
        help="file to which a pid is written",
    )
    parser.add_argument(
        "--ts-format", default=None,
        help="timestamp format: ns, ms, epoch, unix, or a strftime pattern",
    )
    parser.add_argument(
        "--line-length", default=None,
        help="length of the lines to be generated in bytes, or 'random'",
    )
    parser.add_argument(
        "--dict", dest="dictionary", default=None,
        help="dictionary of words to use for generating log data",
    )
    parser.add_argument(
        "--max-random-length", type=int, default=None,
        help="upper bound on line length when --line-length=random (default: 80)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="level for the generator's own diagnostics on stderr (default: INFO)",
    )
    parser.add_argument(
        "--config", default=None,
        help="path to a YAML file with default settings",
    )
    return parser


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(argv=None) -> Config:
    """Build Config from CLI args, then env vars, then YAML, then defaults."""
    args = build_cli_parser().parse_args(argv)
    yaml_data = load_yaml_config(args.config)

    values = {}
    for name, env_var, convert in _SOURCES:
        cli_value = getattr(args, name)
        if cli_value is not None:
            raw = cli_value
        elif env_var in os.environ:
            raw = os.environ[env_var]
        elif name in yaml_data and yaml_data[name] is not None:
            raw = yaml_data[name]
        else:
            continue
        try:
            values[name] = convert(raw)
        except ValueError as e:
            raise ConfigError(f"invalid value for {name}: {raw!r}") from e

    unknown = set(yaml_data) - {name for name, _, _ in _SOURCES}
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))

    config = Config(**values)
    if config.frequency <= 0:
        raise ConfigError(f"frequency must be positive, got {config.frequency}")
    if config.max_random_length <= 0:
        raise ConfigError(
            f"max random length must be positive, got {config.max_random_length}"
        )
    return config
