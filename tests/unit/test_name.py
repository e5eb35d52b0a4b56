"""Unit tests for the human name converter."""

from pio_mapper.converters.name import family_string, name_from_trees, name_text, name_to_trees
from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import MaidenName, Name
from pio_mapper.terminology.urls import NameExtension

BASE_PATH = "d1e2f3a4-b5c6-4d7e-8f9a-0b1c2d3e4f84.KBV_PR_MIO_ULB_RelatedPerson_Contact_Person"


class TestNameStrings:
    """Test the concatenated family and display strings."""

    def test_family_string_order(self) -> None:
        assert family_string("Bergen", particle="von", addition="Gräfin") == "von Gräfin Bergen"

    def test_family_string_skips_absent_parts(self) -> None:
        assert family_string("Bergen") == "Bergen"
        assert family_string("Bergen", addition="Graf") == "Graf Bergen"

    def test_name_text(self) -> None:
        assert name_text("Bergen", prefix="Dr.", given="Eva") == "Dr. Bergen, Eva"
        assert name_text("Bergen") == "Bergen"
        assert name_text("Bergen", given="Eva") == "Bergen, Eva"


class TestNameToTrees:
    """Test writing names."""

    def test_name_without_maiden_name_uses_unindexed_element(self) -> None:
        """Test a single name is written to ``name``."""
        # Arrange
        name = Name(family_name="Bergen", given_name="Eva")

        # Act
        fragments = name_to_trees(name, BASE_PATH)

        # Assert
        assert len(fragments) == 1
        assert fragments[0].absolute_path == f"{BASE_PATH}.name"
        assert fragments[0].get_value("use") == CodeValue("official")
        assert fragments[0].get_value_as_string("text") == "Bergen, Eva"

    def test_full_name_with_maiden_name(self, sample_name: Name) -> None:
        """Test legal and birth name fragments carry all parts."""
        # Act
        legal, maiden = name_to_trees(sample_name, BASE_PATH)

        # Assert
        assert legal.absolute_path == f"{BASE_PATH}.name[0]"
        assert legal.get_value_as_string("given") == "Eva"
        assert legal.get_value_as_string("prefix") == "Dr."
        assert legal.get_value("prefix.extension[0]") == UriValue(NameExtension.QUALIFIER)
        assert legal.get_value("prefix.extension[0].valueCode") == CodeValue("AC")
        assert legal.get_value_as_string("family") == "von Gräfin Bergen"
        assert legal.get_value_as_string("text") == "Dr. von Gräfin Bergen, Eva"
        assert [
            (node.get_value_as_string(), node.get_value_as_string("valueString"))
            for node in legal.get_repeated("family.extension")
        ] == [
            (NameExtension.OWN_NAME, "Bergen"),
            (NameExtension.ADDITION, "Gräfin"),
            (NameExtension.PARTICLE, "von"),
        ]

        assert maiden.absolute_path == f"{BASE_PATH}.name[1]"
        assert maiden.get_value("use") == CodeValue("maiden")
        assert maiden.get_value_as_string("family") == "Schulz"
        assert maiden.get_value_as_string("text") == "Schulz"

    def test_own_name_written_even_when_empty(self) -> None:
        """Test the own-name extension is present for an empty family name."""
        # Act
        (fragment,) = name_to_trees(Name(given_name="Eva"), BASE_PATH)

        # Assert
        assert fragment.get_value_as_string("family.extension[0].valueString") == ""
        assert fragment.get_value_as_string("family") == ""


class TestNameFromTrees:
    """Test reading names."""

    def test_round_trip(self, sample_name: Name) -> None:
        """Test a full name reads back unchanged."""
        assert name_from_trees(name_to_trees(sample_name, BASE_PATH)) == sample_name

    def test_birth_name_only_leaves_legal_name_empty(self) -> None:
        # Arrange
        fragments = name_to_trees(Name(family_name="Bergen", maiden_name=MaidenName("Schulz")), BASE_PATH)

        # Act
        name = name_from_trees(fragments[1:])

        # Assert
        assert name.family_name == ""
        assert name.maiden_name == MaidenName(family_name="Schulz")

    def test_reads_unindexed_family_extension(self) -> None:
        """Test names stored with a fixed ``family.extension`` element are read."""
        # Arrange
        fragment = SubTree(f"{BASE_PATH}.name")
        fragment.set_value("family", StringValue("Bergen"))
        fragment.set_value("family.extension", UriValue(NameExtension.OWN_NAME))
        fragment.set_value("family.extension.valueString", StringValue("Bergen"))

        # Act
        name = name_from_trees([fragment])

        # Assert
        assert name == Name(family_name="Bergen")

    def test_no_fragments(self) -> None:
        assert name_from_trees([]) == Name()
