"""Terminology module.

This module provides value set lookups, coding helpers and the fixed
identifier and extension tables of the document profile.
"""

from pio_mapper.terminology.codes import check_code, check_coding, read_coding, write_coding
from pio_mapper.terminology.identifier_types import (
    ORGANIZATION_IDENTIFIER_TYPES,
    PRACTITIONER_IDENTIFIER_TYPES,
    IdentifierType,
    label_for_code,
    lookup_identifier_type,
)
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.value_sets import SelectOption, ValueSet, load_value_set_table

__all__ = [
    "IdentifierType",
    "ORGANIZATION_IDENTIFIER_TYPES",
    "PRACTITIONER_IDENTIFIER_TYPES",
    "SelectOption",
    "TerminologyResolver",
    "ValueSet",
    "check_code",
    "check_coding",
    "label_for_code",
    "load_value_set_table",
    "lookup_identifier_type",
    "read_coding",
    "write_coding",
]
