"""Whole-document access.

A document is a tree rooted at the empty path whose first level holds one
node per entity uuid and whose second level holds the resource, keyed by
its resource key. This module finds resource fragments in such a tree,
stores converted fragments back and loads the domain objects of a document.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pio_mapper.converters.contact_person import contact_persons_from_trees
from pio_mapper.converters.extension import extensions_from_tree, filter_recognized_extensions
from pio_mapper.converters.organization import organizations_from_trees
from pio_mapper.converters.practitioner import practitioners_from_trees
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import ConversionResult, Extension
from pio_mapper.models.resources import ContactPerson, Organization, Practitioner
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import (
    COMPOSITION_KEY,
    CONTACT_PERSON_KEY,
    ORGANIZATION_KEY,
    PATIENT_KEY,
    PRACTITIONER_KEY,
    PRACTITIONER_ROLE_KEY,
)
from pio_mapper.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


def document_from_dict(raw: Any) -> SubTree:
    """Build a document from its JSON form.

    Accepts either a whole tree (``{"absolutePath": "", ...}``) or a list of
    resource fragments as returned by the backend (``{"subTrees": [...]}``).

    Raises:
        ValidationError: If the JSON has neither shape
    """
    if isinstance(raw, dict) and "subTrees" in raw:
        document = SubTree("")
        store_fragments(document, [SubTree.from_dict(item) for item in raw["subTrees"]])
        return document
    if isinstance(raw, dict) and "absolutePath" in raw:
        document = SubTree.from_dict(raw)
        if document.absolute_path:
            # a single resource fragment; wrap it
            wrapped = SubTree("")
            store_fragments(wrapped, [document])
            return wrapped
        return document
    raise ValidationError(
        "Document JSON must be a tree ({'absolutePath': ...}) or a fragment list ({'subTrees': [...]})"
    )


def load_document(path: Path) -> SubTree:
    """Read a document JSON file.

    Raises:
        ValidationError: If the file is not valid JSON or has an unknown shape
        OSError: If the file cannot be read
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON in document file: {path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    document = document_from_dict(raw)
    logger.info(f"Loaded document {path} with {len(document.children)} entities")
    return document


def resource_fragments(document: SubTree, resource_key: str) -> list[SubTree]:
    """Return all fragments of one resource kind, in document order."""
    fragments = []
    for entity in document.children:
        for child in entity.children:
            if child.last_path_element == resource_key:
                fragments.append(child)
    return fragments


def resource_ids(document: SubTree, resource_key: str) -> list[str]:
    return [fragment.resource_id for fragment in resource_fragments(document, resource_key)]


def patient_id(document: SubTree) -> Optional[str]:
    """Entity uuid of the document's patient, if the document has one."""
    ids = resource_ids(document, PATIENT_KEY)
    if len(ids) > 1:
        logger.warning(f"Document holds {len(ids)} patients; using the first one")
    return ids[0] if ids else None


def author_ids(document: SubTree) -> list[str]:
    """Entity uuids referenced as ``author`` of the document's composition."""
    ids = []
    for composition in resource_fragments(document, COMPOSITION_KEY):
        for author in composition.get_repeated("author"):
            reference = author.get_value_as_string("reference")
            if reference:
                ids.append(reference)
    return ids


def store_fragments(document: SubTree, fragments: list[SubTree]) -> None:
    """Store resource fragments in a document, replacing earlier versions.

    Raises:
        TreePathError: If a fragment lies deeper than ``<uuid>.<ResourceKey>``
    """
    for fragment in fragments:
        entity_id = fragment.resource_id
        if fragment.absolute_path == entity_id:
            document.add_child(fragment)
            continue
        if not document.has_path(entity_id):
            document.add_child(SubTree(entity_id))
        document.get_sub_tree(entity_id).add_child(fragment)
        logger.debug(f"Stored fragment {fragment.absolute_path}")


def load_contact_persons(document: SubTree, resolver: TerminologyResolver) -> list[ContactPerson]:
    return contact_persons_from_trees(resource_fragments(document, CONTACT_PERSON_KEY), resolver)


def load_organizations(document: SubTree, resolver: TerminologyResolver) -> list[Organization]:
    return organizations_from_trees(resource_fragments(document, ORGANIZATION_KEY), resolver)


def load_practitioners(
    document: SubTree, resolver: TerminologyResolver
) -> ConversionResult[Practitioner]:
    """Load practitioners merged with their roles and author flags."""
    return practitioners_from_trees(
        resource_fragments(document, PRACTITIONER_KEY),
        resource_fragments(document, PRACTITIONER_ROLE_KEY),
        resolver,
        author_ids(document),
    )


def load_patient_extensions(document: SubTree) -> ConversionResult[Extension]:
    """Load the first religion, interpreter and communication-notes extensions of the patient."""
    patients = resource_fragments(document, PATIENT_KEY)
    if not patients:
        return ConversionResult()
    return filter_recognized_extensions(extensions_from_tree(patients[0]))
