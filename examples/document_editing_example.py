"""Document editing examples for the PIO resource mapper.

This module demonstrates the round trip a form goes through: objects are
written into a hand-off document, read back with labels for display,
edited, and stored again. It also shows how conversion errors surface.
"""

import asyncio
import logging

from pio_mapper.config import build_resolver, load_config
from pio_mapper.converters import (
    address_label,
    name_label,
    organizations_to_trees,
    practitioners_to_trees,
    telecom_label,
)
from pio_mapper.document.reader import (
    load_organizations,
    load_practitioners,
    resource_fragments,
    store_fragments,
)
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import Address, Name, Telecom
from pio_mapper.models.resources import Organization, OrganizationIdentifier, Practitioner
from pio_mapper.terminology.urls import PRACTITIONER_ROLE_KEY
from pio_mapper.utils.exceptions import PIOMapperError

# Configure logging to see the converters at work
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

ORGANIZATION_ID = "c3d4e5f6-a7b8-4c9d-8e0f-1a2b3c4d5e73"
PRACTITIONER_ID = "6f1d2a3b-4c5d-4e6f-8a9b-0c1d2e3f4a51"


def example_1_store_and_list(document: SubTree, resolver):
    """Example 1: Store an organization and a practitioner, then list them.

    The listing uses the same labels a form shows in its overview table.
    """
    print("=" * 80)
    print("EXAMPLE 1: Store and list resources")
    print("=" * 80)
    print()

    organization = Organization(
        id=ORGANIZATION_ID,
        name="Praxis Dr. Bergen",
        type="arztpraxis",
        identifier=[OrganizationIdentifier("office-number", "123456700")],
        address=[Address(use="work", street="Hauptstraße", house_number="5", postal_code="10115", city="Berlin")],
        telecom=[Telecom(system="phone", value="030 1234567", label="Telefon")],
    )
    practitioner = Practitioner(
        id=PRACTITIONER_ID,
        organization=ORGANIZATION_ID,
        role="309343006",
        speciality="01",
        name=Name(family_name="Bergen", given_name="Eva", prefix="Dr."),
    )

    store_fragments(document, organizations_to_trees([organization], resolver))
    trees = asyncio.run(practitioners_to_trees([practitioner], resolver))
    store_fragments(document, trees.practitioners + trees.roles)

    for stored in load_organizations(document, resolver):
        print(f"Organization: {stored.name}")
        print(f"  Address: {address_label(stored.address[0] if stored.address else None)}")
        print(f"  Contact: {telecom_label(stored.telecom)}")
    for stored in load_practitioners(document, resolver).items:
        print(f"Practitioner: {name_label(stored.name)} (role {stored.role})")
    print()


def example_2_edit_practitioner(document: SubTree, resolver):
    """Example 2: Edit a stored practitioner.

    Passing the document's existing roles keeps the role id, so the edit
    updates the role in place instead of adding a second one.
    """
    print("=" * 80)
    print("EXAMPLE 2: Edit a practitioner")
    print("=" * 80)
    print()

    existing_roles = resource_fragments(document, PRACTITIONER_ROLE_KEY)
    (practitioner,) = load_practitioners(document, resolver).items
    practitioner.speciality = "03"

    trees = asyncio.run(practitioners_to_trees([practitioner], resolver, existing_roles))
    store_fragments(document, trees.practitioners + trees.roles)

    roles = resource_fragments(document, PRACTITIONER_ROLE_KEY)
    print(f"Roles in document: {len(roles)} ({roles[0].resource_id})")
    print(f"New specialty: {load_practitioners(document, resolver).items[0].speciality}")
    print()


def example_3_handle_conversion_errors(resolver):
    """Example 3: Handle conversion errors.

    Unknown identifier labels and malformed ids raise PIOMapperError
    subclasses; nothing is written for the failing batch.
    """
    print("=" * 80)
    print("EXAMPLE 3: Handling conversion errors")
    print("=" * 80)
    print()

    organization = Organization(
        id=ORGANIZATION_ID,
        identifier=[OrganizationIdentifier("steuernummer", "42")],
    )
    try:
        organizations_to_trees([organization], resolver)
    except PIOMapperError as e:
        print(f"Conversion failed ({type(e).__name__}): {e}")
    print()


def main():
    """Run all examples against an in-memory document."""
    config = load_config()
    resolver = build_resolver(config)
    document = SubTree("")

    example_1_store_and_list(document, resolver)
    example_2_edit_practitioner(document, resolver)
    example_3_handle_conversion_errors(resolver)


if __name__ == "__main__":
    main()
