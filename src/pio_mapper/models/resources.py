"""Domain objects for the resources edited in a hand-off document."""

from dataclasses import dataclass, field
from typing import Optional

from pio_mapper.models.common import Address, Name, Telecom


@dataclass
class ContactPerson:
    """A related person to contact about the patient.

    Attributes:
        id: Entity uuid of the RelatedPerson resource
        role: Relationship type code
        gender: Administrative gender code, or one of the extended codes
            ("X", "D") carried in the gender extension
        name: Person name
        address: Addresses of the person
        telecom: Contact points of the person
    """

    id: str
    role: Optional[str] = None
    gender: Optional[str] = None
    name: Optional[Name] = None
    address: list[Address] = field(default_factory=list)
    telecom: list[Telecom] = field(default_factory=list)


@dataclass
class Practitioner:
    """A practitioner merged with the data of its PractitionerRole.

    ``role``, ``speciality`` and ``organization`` live on the
    PractitionerRole resource in the document; ``author`` is derived from the
    document's author references and never stored.

    Attributes:
        id: Entity uuid of the Practitioner resource
        organization: Entity uuid of the organization the role refers to
        additional_info: Free-text comment
        qualification: Qualification code
        role: Role code
        speciality: Specialty code
        name: Practitioner name
        address: Addresses
        telecom: Contact points
        anr: Lifelong physician number ("ANR")
        efn: Uniform training number ("EFN")
        zanr: Dentist number ("ZANR")
        author: Whether the practitioner is an author of the document
    """

    id: str
    organization: str = ""
    additional_info: Optional[str] = None
    qualification: Optional[str] = None
    role: Optional[str] = None
    speciality: Optional[str] = None
    name: Optional[Name] = None
    address: list[Address] = field(default_factory=list)
    telecom: list[Telecom] = field(default_factory=list)
    anr: Optional[str] = None
    efn: Optional[str] = None
    zanr: Optional[str] = None
    author: bool = False


@dataclass
class PractitionerRole:
    """Role of a practitioner within an organization, as stored in the document."""

    id: str
    practitioner: Optional[str] = None
    organization: Optional[str] = None
    role: Optional[str] = None
    speciality: Optional[str] = None


@dataclass
class OrganizationIdentifier:
    """Typed identifier of an organization; ``label`` comes from the identifier-type table."""

    label: str
    value: str


@dataclass
class Organization:
    """A care facility or practice."""

    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    identifier: list[OrganizationIdentifier] = field(default_factory=list)
    address: list[Address] = field(default_factory=list)
    telecom: list[Telecom] = field(default_factory=list)
