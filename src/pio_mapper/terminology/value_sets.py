"""Value set lookup tables.

The lookup table maps a value set URL to the list of codings it contains.
A copy ships with the package; a different file can be configured.
"""

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Optional

from pio_mapper.models.common import Coding
from pio_mapper.utils.exceptions import ConfigurationError, ValueSetNotFoundError

logger = logging.getLogger(__name__)

ValueSetTable = dict[str, list[dict[str, Any]]]


@dataclass(frozen=True)
class SelectOption:
    """One entry of a drop-down: the code and its label."""

    value: str
    label: str


def load_value_set_table(path: Optional[Path] = None) -> ValueSetTable:
    """Load a value set lookup table.

    Args:
        path: JSON file to load. If None, the bundled table is used.

    Returns:
        Mapping of value set URL to its codings

    Raises:
        ConfigurationError: If the file cannot be read or is not valid JSON
    """
    try:
        if path is None:
            raw = resources.files("pio_mapper.terminology").joinpath(
                "data/value_sets.json"
            ).read_text(encoding="utf-8")
            source = "bundled value sets"
        else:
            raw = path.read_text(encoding="utf-8")
            source = str(path)
        table = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in value set file: {path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read value set file: {path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(table, dict):
        raise ConfigurationError(
            f"Value set file {source} must contain a JSON object keyed by value set URL"
        )
    logger.info(f"Loaded {len(table)} value sets from {source}")
    return table


class ValueSet:
    """Read-only view on one value set of a lookup table.

    Attributes:
        url: Value set URL
    """

    def __init__(self, url: str, table: ValueSetTable) -> None:
        """Select a value set.

        Raises:
            ValueSetNotFoundError: If the URL is missing or the set is empty
        """
        entries = table.get(url)
        if not entries:
            raise ValueSetNotFoundError(f"ValueSet {url} not found")
        self.url = url
        self._entries = entries

    @property
    def options(self) -> list[SelectOption]:
        """Drop-down options; the label prefers the German display."""
        return [
            SelectOption(
                value=entry["code"],
                label=entry.get("germanDisplay") or entry.get("display") or entry["code"],
            )
            for entry in self._entries
        ]

    def get_coding_by_code(self, code: str) -> Optional[Coding]:
        for entry in self._entries:
            if entry.get("code") == code:
                return Coding(
                    code=entry["code"],
                    display=entry.get("display"),
                    system=entry.get("system"),
                    version=entry.get("version"),
                )
        return None

    def get_code_by_label(self, label: str) -> Optional[str]:
        for option in self.options:
            if option.label == label:
                return option.value
        return None
