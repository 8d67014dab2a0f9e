"""
Utility functions for configuration, logging and size formatting.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional


SIZE_SUFFIXES = "BKMGTPE"

CONFIG_TYPES = {
    "sysroot": str,
    "output": str,
    "bytes": bool,
    "log_file": str,
}


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Set up logging configuration. Diagnostics go to stderr, never stdout."""
    handlers = [logging.StreamHandler()]
    log_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            log_error = e
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )
    if log_error is not None:
        logging.warning(f"Could not open log file {log_file} ({log_error}), logging to stderr only")


def get_config_file() -> Path:
    """Get the configuration file path ($LSMEM_CONFIG, else the user config directory)."""
    if config_file := os.getenv('LSMEM_CONFIG'):
        return Path(config_file)
    return Path.home() / ".config" / "lsmem" / "config.toml"


def get_config() -> dict:
    """Get the [lsmem] table from the configuration file, or {} if unavailable."""
    config_file = get_config_file()
    try:
        with open(config_file, "rb") as f:
            config = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logging.warning(f"Could not load {config_file} ({e}), using defaults")
        return {}
    return _validate_config(config_file, config.get("lsmem", {}))


def _validate_config(config_file: Path, table) -> dict:
    """Keep only known [lsmem] settings of the expected type; warn about the rest."""
    if not isinstance(table, dict):
        logging.warning(f"Ignoring [lsmem] in {config_file}: expected a table")
        return {}
    config = {}
    for key, value in table.items():
        expected = CONFIG_TYPES.get(key)
        if expected is None:
            logging.warning(f"Ignoring unknown setting {key!r} in {config_file}")
        elif not isinstance(value, expected):
            logging.warning(f"Ignoring setting {key!r} in {config_file}: "
                            f"expected {expected.__name__}, got {type(value).__name__}")
        else:
            config[key] = value
    return config


def get_sysroot(cli_value: Optional[str] = None, config: Optional[dict] = None) -> Path:
    """Get the system root following the configuration hierarchy."""
    # 1. Command line
    if cli_value:
        return Path(cli_value)

    # 2. Environment variable
    if sysroot := os.getenv('LSMEM_SYSROOT'):
        return Path(sysroot)

    # 3. Configuration file
    if config is None:
        config = get_config()
    if sysroot := config.get('sysroot'):
        return Path(sysroot)

    # 4. Fallback to default
    return Path('/')


def size_to_human_string(nbytes: int) -> str:
    """
    Format a byte count with a one-letter binary suffix and at most one decimal.

    Examples: 512 -> "512B", 134217728 -> "128M", 1610612736 -> "1.5G"
    """
    exp = 0
    while exp < 60 and nbytes >= 1 << (exp + 10):
        exp += 10
    dec = nbytes >> exp
    frac = nbytes - (dec << exp)
    suffix = SIZE_SUFFIXES[exp // 10]

    if frac:
        # thousandths of the unit, rounded to tenths
        frac = ((frac * 1000 >> exp) + 50) // 100
        if frac == 10:
            dec += 1
            frac = 0
    if frac:
        return f"{dec}.{frac}{suffix}"
    return f"{dec}{suffix}"
