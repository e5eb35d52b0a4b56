"""Log formatters for the PIO resource mapper."""

import logging
import re
from typing import List, Tuple


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that redacts personal data from log messages.

    Redacts e-mail addresses, phone numbers and names logged as
    ``name=...``, ``family=...`` or ``given=...``.

    Attributes:
        redact_pii: Whether redaction is enabled
        patterns: ``(regex, replacement)`` pairs applied in order

    Example:
        >>> formatter = PIIRedactingFormatter(redact_pii=True)
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # e-mail: anna.mueller@example.de
            (re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b"), "[EMAIL-REDACTED]"),
            # phone: +49 30 1234567, 030/1234567, 0171-1234567
            (
                re.compile(
                    r"(?<![\w-])(?:\+\d{1,3}[\s/-]?\(?\d{1,5}\)?|0\d{2,5})[\s/-]?\d{3,}(?:[\s-]\d{2,})*"
                ),
                "[PHONE-REDACTED]",
            ),
            # name="Anna Müller", family='Müller', given=Anna
            (re.compile(r"\b(name|family|given)=[\"']?([^\"',|]+)[\"']?"), r"\1=[NAME-REDACTED]"),
        ]

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        if self.redact_pii:
            for pattern, replacement in self.patterns:
                formatted = pattern.sub(replacement, formatted)
        return formatted
