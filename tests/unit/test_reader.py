"""Unit tests for whole-document access."""

import json
from pathlib import Path

import pytest

from pio_mapper.document.primitives import StringValue, UriValue, UuidValue
from pio_mapper.document.reader import (
    author_ids,
    document_from_dict,
    load_document,
    load_patient_extensions,
    patient_id as document_patient_id,
    resource_fragments,
    resource_ids,
    store_fragments,
)
from pio_mapper.document.tree import SubTree
from pio_mapper.terminology.urls import PatientExtension
from pio_mapper.utils.exceptions import TreePathError, ValidationError

COMPOSITION_ID = "7c6b5a49-3828-4716-9504-f3e2d1c0b9a8"
AUTHOR_ID = "6f1d2a3b-4c5d-4e6f-8a9b-0c1d2e3f4a51"
SECOND_AUTHOR_ID = "9a8b7c6d-5e4f-4a3b-9c2d-1e0f9a8b7c62"
ORGANIZATION_PATH = "o1.KBV_PR_MIO_ULB_Organization"


def organization_fragment(name: str) -> SubTree:
    fragment = SubTree(ORGANIZATION_PATH)
    fragment.set_value("name", StringValue(name))
    return fragment


class TestDocumentFromDict:
    """Test building documents from their JSON forms."""

    def test_fragment_list(self) -> None:
        """Test a backend fragment list is stored below entity nodes."""
        # Arrange
        raw = {"subTrees": [organization_fragment("Pflegeheim Ost").to_dict()]}

        # Act
        document = document_from_dict(raw)

        # Assert
        assert document.absolute_path == ""
        assert document.get_value_as_string(f"{ORGANIZATION_PATH}.name") == "Pflegeheim Ost"

    def test_whole_tree(self, empty_document: SubTree, patient_id: str) -> None:
        document = document_from_dict(empty_document.to_dict())

        assert resource_ids(document, "KBV_PR_MIO_ULB_Patient") == [patient_id]

    def test_single_fragment_is_wrapped(self) -> None:
        document = document_from_dict(organization_fragment("Praxis").to_dict())

        assert document.absolute_path == ""
        assert [f.absolute_path for f in resource_fragments(document, "KBV_PR_MIO_ULB_Organization")] == [
            ORGANIZATION_PATH
        ]

    def test_unknown_shape(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            document_from_dict({"resources": []})

        assert "subTrees" in str(exc_info.value)

    def test_load_document_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed document files raise ValidationError with a fix hint."""
        document_file = tmp_path / "document.json"
        document_file.write_text("{", encoding="utf-8")

        with pytest.raises(ValidationError) as exc_info:
            load_document(document_file)

        assert "Fix: Check JSON syntax" in str(exc_info.value)

    def test_load_document(self, tmp_path: Path, empty_document: SubTree) -> None:
        document_file = tmp_path / "document.json"
        document_file.write_text(json.dumps(empty_document.to_dict()), encoding="utf-8")

        assert load_document(document_file).to_dict() == empty_document.to_dict()


class TestDocumentLookups:
    """Test finding resources in a document."""

    def test_patient_id(self, empty_document: SubTree, patient_id: str) -> None:
        assert document_patient_id(empty_document) == patient_id

    def test_no_patient(self) -> None:
        assert document_patient_id(SubTree("")) is None

    def test_author_ids(self, empty_document: SubTree) -> None:
        """Test both author element spellings are collected."""
        # Arrange
        composition = SubTree(f"{COMPOSITION_ID}.KBV_PR_MIO_ULB_Composition")
        composition.set_value("author[0].reference", UuidValue(AUTHOR_ID))
        composition.set_value("author.reference", UuidValue(SECOND_AUTHOR_ID))
        store_fragments(empty_document, [composition])

        # Act
        ids = author_ids(empty_document)

        # Assert
        assert ids == [SECOND_AUTHOR_ID, AUTHOR_ID]


class TestStoreFragments:
    """Test writing converted fragments back into a document."""

    def test_replaces_earlier_version(self, empty_document: SubTree) -> None:
        """Test storing a fragment twice keeps only the latest version."""
        # Act
        store_fragments(empty_document, [organization_fragment("Alt")])
        store_fragments(empty_document, [organization_fragment("Neu")])

        # Assert
        fragments = resource_fragments(empty_document, "KBV_PR_MIO_ULB_Organization")
        assert len(fragments) == 1
        assert fragments[0].get_value_as_string("name") == "Neu"

    def test_entity_level_fragment(self) -> None:
        document = SubTree("")
        entity = SubTree("o2")
        entity.add_child(SubTree("o2.KBV_PR_MIO_ULB_Organization"))

        store_fragments(document, [entity])

        assert document.has_path("o2.KBV_PR_MIO_ULB_Organization")

    def test_rejects_deep_fragment(self, empty_document: SubTree) -> None:
        with pytest.raises(TreePathError):
            store_fragments(empty_document, [SubTree(f"{ORGANIZATION_PATH}.address[0]")])


class TestPatientExtensions:
    """Test reading the recognized patient extensions."""

    def test_first_occurrence_per_url(self, empty_document: SubTree, patient_id: str) -> None:
        # Arrange
        patient = empty_document.get_sub_tree(f"{patient_id}.KBV_PR_MIO_ULB_Patient")
        patient.set_value("extension[0]", UriValue(PatientExtension.RELIGION))
        patient.set_value("extension[0].valueString", StringValue("evangelisch"))
        patient.set_value("extension[1]", UriValue(PatientExtension.RELIGION))
        patient.set_value("extension[1].valueString", StringValue("katholisch"))

        # Act
        result = load_patient_extensions(empty_document)

        # Assert
        assert [e.value for e in result.items] == ["evangelisch"]
        assert [e.value for e in result.ignored] == ["katholisch"]

    def test_document_without_patient(self) -> None:
        result = load_patient_extensions(SubTree(""))

        assert result.items == []
