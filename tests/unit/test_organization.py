"""Unit tests for the organization converter."""

import pytest

from pio_mapper.converters.organization import organizations_from_trees, organizations_to_trees
from pio_mapper.document.primitives import CodeValue, StringValue
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import Address, Telecom
from pio_mapper.models.resources import Organization, OrganizationIdentifier
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.utils.exceptions import IdentifierLookupError


@pytest.fixture
def nursing_home() -> Organization:
    return Organization(
        id="o1",
        name="Pflegeheim Ost",
        type="krankenhaus",
        identifier=[OrganizationIdentifier(label="facility-ID", value="998877")],
    )


class TestOrganizationsToTrees:
    """Test writing Organization fragments."""

    def test_identifier_layout(self, nursing_home: Organization, resolver: TerminologyResolver) -> None:
        """Test a facility ID is written with its type coding and naming system."""
        # Act
        (fragment,) = organizations_to_trees([nursing_home], resolver)

        # Assert
        assert fragment.absolute_path == "o1.KBV_PR_MIO_ULB_Organization"
        assert fragment.get_value_as_string("name") == "Pflegeheim Ost"
        assert fragment.get_value("identifier[0].use") == CodeValue("official")
        assert fragment.get_value_as_string("identifier[0].system") == "http://fhir.de/sid/arge-ik/iknr"
        assert fragment.get_value_as_string("identifier[0].value") == "998877"
        assert fragment.get_value_as_string("identifier[0].type.coding.code") == "XX"
        assert fragment.get_value_as_string("identifier[0].type.coding.version") == "4.0.1"
        assert fragment.get_value_as_string("type.coding.code") == "krankenhaus"
        assert fragment.get_value_as_string("type.coding.display") == "Krankenhaus"

    def test_empty_identifier_values_skipped(self, resolver: TerminologyResolver) -> None:
        """Test identifiers without a value are skipped and indexes stay contiguous."""
        # Arrange
        organization = Organization(
            id="o2",
            identifier=[
                OrganizationIdentifier("office-number", ""),
                OrganizationIdentifier("network-ID", "5-2-123456"),
            ],
        )

        # Act
        (fragment,) = organizations_to_trees([organization], resolver)

        # Assert
        assert [node.last_path_element for node in fragment.get_repeated("identifier")] == ["identifier[0]"]
        assert fragment.get_value_as_string("identifier[0].type.coding.code") == "PRN"

    def test_unknown_label_fails_whole_conversion(
        self, nursing_home: Organization, resolver: TerminologyResolver
    ) -> None:
        """Test an unknown identifier label raises and no fragment is produced."""
        # Arrange
        broken = Organization(id="o2", name="Praxis", identifier=[OrganizationIdentifier("steuernummer", "1")])
        result = None

        # Act & Assert
        with pytest.raises(IdentifierLookupError) as exc_info:
            result = organizations_to_trees([nursing_home, broken], resolver)

        assert "steuernummer" in str(exc_info.value)
        assert result is None

    def test_unknown_label_with_empty_value_ignored(self, resolver: TerminologyResolver) -> None:
        organization = Organization(id="o3", identifier=[OrganizationIdentifier("steuernummer", "")])

        (fragment,) = organizations_to_trees([organization], resolver)

        assert not fragment.has_path("identifier[0]")

    def test_unresolvable_type_not_written(self, resolver: TerminologyResolver) -> None:
        (fragment,) = organizations_to_trees([Organization(id="o4", type="raumstation")], resolver)

        assert not fragment.has_path("type")


class TestOrganizationsFromTrees:
    """Test reading Organization fragments."""

    def test_round_trip(self, nursing_home: Organization, resolver: TerminologyResolver) -> None:
        """Test the nursing home reads back unchanged."""
        fragments = organizations_to_trees([nursing_home], resolver)

        assert organizations_from_trees(fragments, resolver) == [nursing_home]

    def test_round_trip_with_address_and_telecom(
        self,
        sample_address: Address,
        sample_telecoms: list[Telecom],
        resolver: TerminologyResolver,
    ) -> None:
        organization = Organization(
            id="o5",
            name="Praxis Dr. Bergen",
            type="arztpraxis",
            identifier=[
                OrganizationIdentifier("office-number", "123456700"),
                OrganizationIdentifier("network-ID", "1-2-3"),
            ],
            address=[sample_address],
            telecom=sample_telecoms,
        )

        result = organizations_from_trees(organizations_to_trees([organization], resolver), resolver)

        assert result == [organization]

    def test_reads_indexed_name_and_unknown_identifier_type(self, resolver: TerminologyResolver) -> None:
        """Test alternative element spellings and unknown identifier codes."""
        # Arrange
        fragment = SubTree("o6.KBV_PR_MIO_ULB_Organization")
        fragment.set_value("name[0]", StringValue("Klinikum Süd"))
        fragment.set_value("type[0].coding.code", CodeValue("krankenhaus"))
        fragment.set_value("identifier.type.coding.code", CodeValue("TAX"))
        fragment.set_value("identifier.value", StringValue("42"))

        # Act
        (organization,) = organizations_from_trees([fragment], resolver)

        # Assert
        assert organization.name == "Klinikum Süd"
        assert organization.type == "krankenhaus"
        assert organization.identifier == [OrganizationIdentifier(label="", value="42")]

    def test_repeated_elements_read_in_index_order(self, resolver: TerminologyResolver) -> None:
        """Test telecoms and addresses stored out of order read back by index."""
        # Arrange
        fragment = SubTree("o7.KBV_PR_MIO_ULB_Organization")
        fragment.set_value("telecom[1].system", CodeValue("email"))
        fragment.set_value("telecom[1].value", StringValue("second"))
        fragment.set_value("telecom[0].system", CodeValue("phone"))
        fragment.set_value("telecom[0].value", StringValue("first"))
        fragment.set_value("address[1].city", StringValue("Potsdam"))
        fragment.set_value("address[0].city", StringValue("Berlin"))

        # Act
        (organization,) = organizations_from_trees([fragment], resolver)

        # Assert
        assert [telecom.value for telecom in organization.telecom] == ["first", "second"]
        assert [address.city for address in organization.address] == ["Berlin", "Potsdam"]
