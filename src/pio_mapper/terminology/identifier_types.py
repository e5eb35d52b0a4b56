"""Identifier-type tables.

Organizations carry up to four typed identifiers chosen by a human-readable
label; practitioners carry up to three fixed identifiers. Each kind maps to
the type coding and the naming system the profile requires.
"""

from dataclasses import dataclass
from typing import Optional

from pio_mapper.models.common import Coding
from pio_mapper.utils.exceptions import IdentifierLookupError

V2_0203 = "http://terminology.hl7.org/CodeSystem/v2-0203"
IDENTIFIER_TYPE_DE = "http://fhir.de/CodeSystem/identifier-type-de-basis"


@dataclass(frozen=True)
class IdentifierType:
    """Type coding plus the naming system of the identifier value."""

    coding: Coding
    system: str


ORGANIZATION_IDENTIFIER_TYPES: dict[str, IdentifierType] = {
    "office-number": IdentifierType(
        coding=Coding(
            system=V2_0203,
            version="4.0.1",
            code="BSNR",
            display="Primary physician office number",
        ),
        system="https://fhir.kbv.de/NamingSystem/KBV_NS_Base_BSNR",
    ),
    "facility-ID": IdentifierType(
        coding=Coding(system=V2_0203, version="4.0.1", code="XX", display="Organisations-ID"),
        system="http://fhir.de/sid/arge-ik/iknr",
    ),
    "accounting-number": IdentifierType(
        coding=Coding(
            system=IDENTIFIER_TYPE_DE,
            version="4.0.1",
            code="KZVA",
            display="KZVAbrechnungsnummer",
        ),
        system="http://fhir.de/sid/kzbv/kzvabrechnungsnummer",
    ),
    "network-ID": IdentifierType(
        coding=Coding(system=V2_0203, version="4.0.1", code="PRN", display="Provider number"),
        system="https://gematik.de/fhir/sid/telematik-id",
    ),
}

# Emission order is ANR, EFN, ZANR.
PRACTITIONER_IDENTIFIER_TYPES: dict[str, IdentifierType] = {
    "anr": IdentifierType(
        coding=Coding(system=V2_0203, code="LANR", display="Lifelong physician number"),
        system="https://fhir.kbv.de/NamingSystem/KBV_NS_Base_ANR",
    ),
    "efn": IdentifierType(
        coding=Coding(system=V2_0203, code="DN", display="Doctor number"),
        system="http://fhir.de/sid/bundesaerztekammer/efn",
    ),
    "zanr": IdentifierType(
        coding=Coding(system=IDENTIFIER_TYPE_DE, code="ZANR", display="Zahnarztnummer"),
        system="http://fhir.de/sid/kzbv/zahnarztnummer",
    ),
}


def lookup_identifier_type(label: str) -> IdentifierType:
    """Look up an organization identifier type by its exact, case-sensitive label.

    Raises:
        IdentifierLookupError: If the label is not in the table
    """
    try:
        return ORGANIZATION_IDENTIFIER_TYPES[label]
    except KeyError:
        raise IdentifierLookupError(
            f"Unknown organization identifier label: {label!r}. "
            f"Must be one of: {', '.join(ORGANIZATION_IDENTIFIER_TYPES)}"
        ) from None


def label_for_code(code: Optional[str]) -> Optional[str]:
    """Reverse lookup of an organization identifier label by its type code."""
    for label, identifier_type in ORGANIZATION_IDENTIFIER_TYPES.items():
        if identifier_type.coding.code == code:
            return label
    return None
