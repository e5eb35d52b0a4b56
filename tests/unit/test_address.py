"""Unit tests for the address converter and display labels."""

from pio_mapper.converters.address import (
    address_line,
    address_text,
    addresses_from_trees,
    addresses_to_trees,
)
from pio_mapper.converters.labels import address_label, name_label, telecom_label
from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import Address, Name, Telecom
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import AddressExtension

BASE_PATH = "c3d4e5f6-a7b8-4c9d-8e0f-1a2b3c4d5e73.KBV_PR_MIO_ULB_Organization"


class TestAddressStrings:
    """Test the line and text summaries."""

    def test_address_line(self, sample_address: Address) -> None:
        assert address_line(sample_address) == "Hauptstraße 5, Hinterhaus"

    def test_post_office_box_line(self) -> None:
        assert address_line(Address(post_office_box_number="1234")) == "1234"

    def test_address_text(self, sample_address: Address) -> None:
        assert address_text(sample_address) == "Hauptstraße 5, Hinterhaus, Mitte, 10115 Berlin, D"


class TestAddressesToTrees:
    """Test writing addresses."""

    def test_street_address(self, sample_address: Address) -> None:
        """Test street level parts become line extensions in a fixed order."""
        # Act
        (fragment,) = addresses_to_trees([sample_address], BASE_PATH)

        # Assert
        assert fragment.absolute_path == f"{BASE_PATH}.address[0]"
        assert fragment.get_value("use") == CodeValue("home")
        assert fragment.get_value("type") == CodeValue("both")
        assert fragment.get_value_as_string("line") == "Hauptstraße 5, Hinterhaus"
        assert [
            (node.get_value_as_string(), node.get_value_as_string("valueString"))
            for node in fragment.get_repeated("line.extension")
        ] == [
            (AddressExtension.STREET, "Hauptstraße"),
            (AddressExtension.HOUSE_NUMBER, "5"),
            (AddressExtension.ADDITIONAL_LOCATOR, "Hinterhaus"),
        ]
        assert fragment.get_value("extension[0]") == UriValue(AddressExtension.DISTRICT)
        assert fragment.get_value_as_string("extension[0].valueString") == "Mitte"
        assert fragment.get_value_as_string("postalCode") == "10115"
        assert fragment.get_value_as_string("city") == "Berlin"
        assert fragment.get_value_as_string("country") == "D"

    def test_post_office_box_drops_street_parts(self) -> None:
        """Test a post office box address carries no street level parts."""
        # Arrange
        address = Address(
            street="Hauptstraße",
            house_number="5",
            post_office_box_number="1234",
            postal_code="10115",
            city="Berlin",
            post_office_box_radio="true",
        )

        # Act
        (fragment,) = addresses_to_trees([address], BASE_PATH)

        # Assert
        assert fragment.get_value("type") == CodeValue("postal")
        extensions = fragment.get_repeated("line.extension")
        assert len(extensions) == 1
        assert extensions[0].get_value_as_string() == AddressExtension.POST_OFFICE_BOX
        assert extensions[0].get_value_as_string("valueString") == "1234"
        assert fragment.get_value_as_string("line") == "1234"

    def test_indexes_follow_input_order(self, sample_address: Address) -> None:
        fragments = addresses_to_trees([sample_address, Address(city="Hamburg")], BASE_PATH)

        assert [f.last_path_element for f in fragments] == ["address[0]", "address[1]"]


class TestAddressesFromTrees:
    """Test reading addresses."""

    def test_round_trip(self, sample_address: Address, resolver: TerminologyResolver) -> None:
        """Test a street address reads back unchanged."""
        fragments = addresses_to_trees([sample_address], BASE_PATH)

        assert addresses_from_trees(fragments, resolver) == [sample_address]

    def test_post_office_box_round_trip(self, resolver: TerminologyResolver) -> None:
        # Arrange
        address = Address(
            use="work",
            post_office_box_number="1234",
            postal_code="20095",
            city="Hamburg",
            country="D",
            post_office_box_radio="true",
        )

        # Act
        result = addresses_from_trees(addresses_to_trees([address], BASE_PATH), resolver)

        # Assert
        assert result == [address]

    def test_unknown_country_kept(self, resolver: TerminologyResolver) -> None:
        """Test a country code outside the value set is read unchanged."""
        fragment = SubTree(f"{BASE_PATH}.address")
        fragment.set_value("country", StringValue("ZZ"))

        (address,) = addresses_from_trees([fragment], resolver)

        assert address.country == "ZZ"
        assert address.post_office_box_radio == "false"

    def test_reads_unindexed_district_extension(self, resolver: TerminologyResolver) -> None:
        fragment = SubTree(f"{BASE_PATH}.address")
        fragment.set_value("extension", UriValue(AddressExtension.DISTRICT))
        fragment.set_value("extension.valueString", StringValue("Altona"))

        (address,) = addresses_from_trees([fragment], resolver)

        assert address.district == "Altona"


class TestLabels:
    """Test the one-line labels of names, addresses and contact points."""

    def test_name_label(self) -> None:
        name = Name(family_name="Bergen", particle="von", prefix="Dr.", given_name="Eva")

        assert name_label(name) == "Dr. von Bergen, Eva"

    def test_name_label_without_family(self) -> None:
        assert name_label(Name(given_name="Eva")) == ""
        assert name_label(None) == ""

    def test_street_address_label(self, sample_address: Address) -> None:
        assert address_label(sample_address) == "HOME: Hauptstraße 5 (Hinterhaus), Berlin 10115"

    def test_post_office_box_label(self) -> None:
        address = Address(post_office_box_number="1234", city="Hamburg", postal_code="20095")

        assert address_label(address) == "OTHER: Postfach 1234, Hamburg 20095"

    def test_telecom_label(self, sample_telecoms: list[Telecom]) -> None:
        telecoms = sample_telecoms + [Telecom(system="fax", value="")]

        assert telecom_label(telecoms) == "phone: 030 1234567, email: eva@example.de"
