"""
Pivot options and their INI-file configuration.

Options live in the ``[pivot]`` section of a configuration file::

    [pivot]
    group_rows = yes
    log_level = debug
    log_path = /var/log/pivot.log
"""

from __future__ import annotations

import os
from configparser import ConfigParser, Error as ConfigParserError
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

__all__ = ["PivotOptions", "read_options", "CONFIG_SECTION"]

CONFIG_SECTION = "pivot"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class PivotOptions(BaseModel):
    """Options driving the grid adapter and the row grouping."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    group_rows: bool = Field(
        True, description="Merge repeated leading attribute values when sorted"
    )
    log_level: str = Field("WARNING", description="Level of the pivotgrid logger")
    log_path: str | None = Field(None, description="Log file, stderr when not set")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Normalize the level name and reject unknown levels."""
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level


def read_options(source: str | os.PathLike | IO[str] | ConfigParser | None = None) -> PivotOptions:
    """
    Read pivot options from the ``[pivot]`` section of a configuration.

    Args:
        source: Path to an INI file, an open file object or an already
            loaded ``ConfigParser``. ``None`` gives the defaults.

    Returns:
        Validated PivotOptions. Defaults are used when the section is missing.

    Raises:
        ConfigurationError: If the file can not be read or holds invalid values
    """
    if source is None:
        return PivotOptions()

    if isinstance(source, ConfigParser):
        config = source
    else:
        config = ConfigParser()
        try:
            if hasattr(source, "read"):
                config.read_file(source)
            else:
                path = os.fspath(source)
                if not os.path.exists(path):
                    raise ConfigurationError(
                        f"Configuration file '{path}' does not exist"
                    )
                config.read(path)
        except ConfigParserError as e:
            raise ConfigurationError(f"Unable to parse configuration: {e}") from e

    if not config.has_section(CONFIG_SECTION):
        return PivotOptions()

    section = config[CONFIG_SECTION]
    values: dict[str, Any] = {}

    try:
        if "group_rows" in section:
            values["group_rows"] = section.getboolean("group_rows")
    except ValueError as e:
        raise ConfigurationError(f"Invalid boolean in [{CONFIG_SECTION}]: {e}") from e

    if "log_level" in section:
        values["log_level"] = section["log_level"]
    if section.get("log_path"):
        values["log_path"] = section["log_path"]

    unknown = set(section.keys()) - set(PivotOptions.model_fields)
    if unknown:
        raise ConfigurationError(
            f"Unknown options in [{CONFIG_SECTION}]: {', '.join(sorted(unknown))}"
        )

    try:
        return PivotOptions(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pivot options: {e}") from e
