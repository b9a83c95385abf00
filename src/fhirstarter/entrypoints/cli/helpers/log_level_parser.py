"""Parsing of ``NAME=LEVEL`` logger-level CLI options.

Values may be repeated or given as one comma/space separated list (as they
arrive from ``FHIRSTARTER_LOGGER_LEVELS``). Level names are validated and
converted to numeric logging levels.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"click_extra": logging.WARNING, "fhirstarter.access": logging.INFO}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split option value(s) on commas and whitespace, dropping empty fragments."""
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in re.split(r"[,\s]+", v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses ``NAME=LEVEL`` pairs into a name to level dict.

    Overrides are merged on top of `DEFAULT_LIB_LEVELS`.

    Args:
        ctx: Click context (unused).
        param: Click parameter (unused).
        value: The raw option value(s).

    Returns:
        dict[str, int]: Logger names mapped to numeric levels.

    Raises:
        click.BadParameter: If an item is not ``NAME=LEVEL`` or the level is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        try:
            name, level_str = item.split("=", 1)
        except ValueError as e:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}") from e
        if not name.strip():
            raise click.BadParameter(f"Missing logger name in {item!r}")
        lvl = logging.getLevelName(level_str.strip().upper())
        if not isinstance(lvl, int):
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
