"""Models module.

This module provides the domain dataclasses used by forms and converters.
"""

from pio_mapper.models.common import (
    Address,
    Coding,
    ConversionResult,
    Extension,
    MaidenName,
    Name,
    Telecom,
)
from pio_mapper.models.resources import (
    ContactPerson,
    Organization,
    OrganizationIdentifier,
    Practitioner,
    PractitionerRole,
)

__all__ = [
    "Address",
    "Coding",
    "ContactPerson",
    "ConversionResult",
    "Extension",
    "MaidenName",
    "Name",
    "Organization",
    "OrganizationIdentifier",
    "Practitioner",
    "PractitionerRole",
    "Telecom",
]
