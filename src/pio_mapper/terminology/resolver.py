"""Terminology resolver injected into the converters.

Lookups by code or label are answered synchronously from the value set
lookup table. When a document carries a custom code the table does not know,
``resolve_by_code_async`` fetches the coding that is already stored in the
document from the backend.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from pio_mapper.models.common import Coding
from pio_mapper.terminology.value_sets import (
    SelectOption,
    ValueSet,
    ValueSetTable,
    load_value_set_table,
)

logger = logging.getLogger(__name__)


class CodingBackend(Protocol):
    """Anything that can fetch a stored coding from the document backend."""

    def fetch_coding(self, path: str, alternate_path: str) -> Optional[Coding]:
        ...


class TerminologyResolver:
    """Cache-backed code and label resolution with a backend fallback.

    The lookup table is never modified after construction, so one resolver
    can be shared by concurrent conversions.

    Example:
        >>> resolver = TerminologyResolver.from_file()
        >>> resolver.resolve_by_code(ValueSetUrl.FACILITY_TYPE, "krankenhaus").display
        'Krankenhaus'
    """

    def __init__(self, table: ValueSetTable, backend: Optional[CodingBackend] = None) -> None:
        self._table = table
        self._backend = backend
        self._value_sets: dict[str, ValueSet] = {}

    @classmethod
    def from_file(
        cls, path: Optional[Path] = None, backend: Optional[CodingBackend] = None
    ) -> "TerminologyResolver":
        """Build a resolver from a value set file (bundled table if None)."""
        return cls(load_value_set_table(path), backend)

    def value_set(self, url: str) -> ValueSet:
        """Return the value set for ``url``.

        Raises:
            ValueSetNotFoundError: If the value set is unknown
        """
        if url not in self._value_sets:
            self._value_sets[url] = ValueSet(url, self._table)
        return self._value_sets[url]

    def options(self, url: str) -> list[SelectOption]:
        return self.value_set(url).options

    def resolve_by_code(self, url: str, code: str) -> Optional[Coding]:
        coding = self.value_set(url).get_coding_by_code(code)
        if coding is None:
            logger.debug(f"Code {code!r} not found in value set {url}")
        return coding

    def resolve_by_label(self, url: str, label: str) -> Optional[str]:
        return self.value_set(url).get_code_by_label(label)

    async def resolve_by_code_async(self, path: str, alternate_path: str) -> Optional[Coding]:
        """Fetch a coding stored in the document from the backend.

        ``path`` is tried first, ``alternate_path`` (the explicit index-0
        spelling) second.

        Returns:
            The stored coding, or None if nothing is stored or no backend is configured

        Raises:
            TransportError: If the backend request fails
        """
        if self._backend is None:
            logger.debug(f"No backend configured; cannot resolve coding at {path}")
            return None
        logger.debug(f"Requesting stored coding from backend: {path} / {alternate_path}")
        return await asyncio.to_thread(self._backend.fetch_coding, path, alternate_path)
