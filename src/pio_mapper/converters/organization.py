"""Organization converter."""

import logging

from pio_mapper.converters.address import addresses_from_trees, addresses_to_trees
from pio_mapper.converters.telecom import telecoms_from_trees, telecoms_to_trees
from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.resources import Organization, OrganizationIdentifier
from pio_mapper.terminology.codes import check_coding, write_coding
from pio_mapper.terminology.identifier_types import label_for_code, lookup_identifier_type
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import ORGANIZATION_KEY, ValueSetUrl

logger = logging.getLogger(__name__)


def _organization_to_tree(organization: Organization, resolver: TerminologyResolver) -> SubTree:
    # look up every label before anything is written
    identifiers = [
        (identifier, lookup_identifier_type(identifier.label))
        for identifier in organization.identifier
        if identifier.value
    ]

    fragment = SubTree(join_path(organization.id, ORGANIZATION_KEY))
    if organization.name:
        fragment.set_value("name", StringValue(organization.name))

    for index, (identifier, identifier_type) in enumerate(identifiers):
        path = f"identifier[{index}]"
        fragment.set_value(join_path(path, "use"), CodeValue("official"))
        fragment.set_value(join_path(path, "system"), UriValue(identifier_type.system))
        fragment.set_value(join_path(path, "value"), StringValue(identifier.value))
        write_coding(fragment, join_path(path, "type.coding"), identifier_type.coding)

    for address_fragment in addresses_to_trees(organization.address, fragment.absolute_path):
        fragment.add_child(address_fragment)
    for telecom_fragment in telecoms_to_trees(organization.telecom, fragment.absolute_path):
        fragment.add_child(telecom_fragment)

    if organization.type:
        coding = resolver.resolve_by_code(ValueSetUrl.FACILITY_TYPE, organization.type)
        if coding is None:
            logger.debug(f"Facility type {organization.type!r} not resolvable; type not written")
        write_coding(fragment, "type.coding", coding)
    return fragment


def organizations_to_trees(
    organizations: list[Organization], resolver: TerminologyResolver
) -> list[SubTree]:
    """Convert organizations into ``<id>.<OrganizationKey>`` fragments.

    Identifiers with an empty value are skipped; the others are written in
    input order.

    Args:
        organizations: Organizations to convert
        resolver: Terminology resolver for the facility type

    Returns:
        One fragment per organization

    Raises:
        IdentifierLookupError: If a non-empty identifier carries an unknown
            label. No fragment is returned in that case.

    Example:
        >>> org = Organization(id="o1", name="Pflegeheim Ost",
        ...                    identifier=[OrganizationIdentifier("facility-ID", "998877")])
        >>> organizations_to_trees([org], resolver)[0].get_value_as_string("name")
        'Pflegeheim Ost'
    """
    return [_organization_to_tree(organization, resolver) for organization in organizations]


def organizations_from_trees(
    fragments: list[SubTree], resolver: TerminologyResolver
) -> list[Organization]:
    """Rebuild organizations from their resource fragments.

    Identifiers with an unknown type code get an empty label.
    """
    type_options = resolver.options(ValueSetUrl.FACILITY_TYPE)
    organizations = []
    for fragment in fragments:
        identifiers = []
        for node in fragment.get_repeated("identifier"):
            code = node.get_value_as_string("type.coding.code")
            identifiers.append(
                OrganizationIdentifier(
                    label=label_for_code(code) or "",
                    value=node.get_value_as_string("value") or "",
                )
            )
        organizations.append(
            Organization(
                id=fragment.resource_id,
                name=fragment.get_value_as_string("name") or fragment.get_value_as_string("name[0]"),
                type=(
                    check_coding(fragment, "type.coding", type_options)
                    or check_coding(fragment, "type[0].coding", type_options)
                ),
                identifier=identifiers,
                address=addresses_from_trees(fragment.get_repeated("address"), resolver),
                telecom=telecoms_from_trees(fragment.get_repeated("telecom"), resolver),
            )
        )
    return organizations
