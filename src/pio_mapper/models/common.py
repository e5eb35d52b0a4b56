"""Shared building blocks of the domain objects.

These dataclasses are the flat, form-friendly shapes the converters produce
from, and consume into, the document tree.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Coding:
    """A coded terminology entry.

    Attributes:
        code: Code within the code system
        display: Human readable label
        system: Code system URI
        version: Code system version
    """

    code: str
    display: Optional[str] = None
    system: Optional[str] = None
    version: Optional[str] = None


@dataclass
class MaidenName:
    """Birth name of a person (family part only)."""

    family_name: str = ""
    particle: Optional[str] = None  # "vorsatzwort", e.g. "von"
    addition: Optional[str] = None  # "namenszusatz", e.g. "Graf"


@dataclass
class Name:
    """Official human name with optional birth name.

    Attributes:
        family_name: Own family name without particle or addition
        given_name: Given name(s)
        prefix: Academic title such as "Dr."
        particle: Name particle ("vorsatzwort")
        addition: Name addition ("namenszusatz")
        maiden_name: Optional birth name
    """

    family_name: str = ""
    given_name: Optional[str] = None
    prefix: Optional[str] = None
    particle: Optional[str] = None
    addition: Optional[str] = None
    maiden_name: Optional[MaidenName] = None


@dataclass
class Address:
    """Postal address.

    A set ``post_office_box_number`` excludes street, house number and
    additional locator. ``post_office_box_radio`` mirrors that choice as
    ``"true"``/``"false"`` for the form.
    """

    use: Optional[str] = None
    street: Optional[str] = None
    house_number: Optional[str] = None
    additional_locator: Optional[str] = None
    post_office_box_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    country: Optional[str] = None
    post_office_box_radio: str = "false"


@dataclass
class Telecom:
    """Contact point such as a phone number or e-mail address."""

    system: str = ""
    value: str = ""
    label: str = ""


@dataclass
class Extension:
    """A FHIR extension with a primitive value.

    Attributes:
        url: Identity of the extension
        value: Value as text
        data_type: Primitive type tag, e.g. ``String`` or ``Boolean``
    """

    url: str
    value: str
    data_type: str = "String"


@dataclass
class ConversionResult(Generic[T]):
    """Converted items plus the inputs that were deliberately left out.

    Attributes:
        items: Successfully converted objects or fragments
        ignored: Inputs dropped during conversion (duplicates, uncorrelated
            resources); callers decide whether to surface them
    """

    items: list[T] = field(default_factory=list)
    ignored: list = field(default_factory=list)
