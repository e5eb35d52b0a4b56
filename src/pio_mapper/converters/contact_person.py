"""Contact person (RelatedPerson) converter."""

import logging
from typing import Optional

from pio_mapper.converters.address import addresses_from_trees, addresses_to_trees
from pio_mapper.converters.name import name_from_trees, name_to_trees
from pio_mapper.converters.telecom import telecoms_from_trees, telecoms_to_trees
from pio_mapper.document.primitives import CodeValue, UriValue, reference_value
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.resources import ContactPerson
from pio_mapper.terminology.codes import check_code, check_coding, write_coding
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import CONTACT_PERSON_KEY, GENDER_EXTENSION, ValueSetUrl

logger = logging.getLogger(__name__)

OTHER_GENDER = "other"
EXTENDED_GENDERS = ("X", "D")


def _contact_person_to_tree(
    person: ContactPerson, resolver: TerminologyResolver, patient_id: str
) -> SubTree:
    fragment = SubTree(join_path(person.id, CONTACT_PERSON_KEY))
    fragment.set_value("patient.reference", reference_value(patient_id))

    if person.role:
        coding = resolver.resolve_by_code(ValueSetUrl.RELATIONSHIP_TYPE, person.role)
        if coding is not None:
            write_coding(fragment, "relationship.coding", coding)
        else:
            logger.debug(f"Relationship code {person.role!r} not resolvable; role not written")

    if person.gender in EXTENDED_GENDERS:
        fragment.set_value("gender", CodeValue(OTHER_GENDER))
        fragment.set_value("gender.extension", UriValue(GENDER_EXTENSION))
        write_coding(
            fragment,
            "gender.extension.valueCoding",
            resolver.resolve_by_code(ValueSetUrl.GENDER_OTHER, person.gender),
        )
    elif person.gender:
        fragment.set_value("gender", CodeValue(person.gender))

    if person.name is not None:
        for name_fragment in name_to_trees(person.name, fragment.absolute_path):
            fragment.add_child(name_fragment)
    for address_fragment in addresses_to_trees(person.address, fragment.absolute_path):
        fragment.add_child(address_fragment)
    for telecom_fragment in telecoms_to_trees(person.telecom, fragment.absolute_path):
        fragment.add_child(telecom_fragment)
    return fragment


def contact_persons_to_trees(
    persons: list[ContactPerson], resolver: TerminologyResolver, patient_id: str
) -> list[SubTree]:
    """Convert contact persons into ``<id>.<ContactPersonKey>`` fragments.

    Args:
        persons: Contact persons to convert
        resolver: Terminology resolver for relationship and gender codings
        patient_id: Entity key of the document's patient

    Returns:
        One fragment per contact person

    Raises:
        TreePathError: If a contact person id is not a valid path segment
    """
    return [_contact_person_to_tree(person, resolver, patient_id) for person in persons]


def _read_gender(fragment: SubTree, options) -> Optional[str]:
    gender = fragment.get_value_as_string("gender")
    if gender == OTHER_GENDER:
        return fragment.get_value_as_string(
            "gender.extension.valueCoding.code"
        ) or fragment.get_value_as_string("gender.extension[0].valueCoding.code")
    return check_code(gender, options)


def contact_persons_from_trees(
    fragments: list[SubTree], resolver: TerminologyResolver
) -> list[ContactPerson]:
    """Rebuild contact persons from their resource fragments."""
    role_options = resolver.options(ValueSetUrl.RELATIONSHIP_TYPE)
    gender_options = [
        option
        for option in resolver.options(ValueSetUrl.ADMINISTRATIVE_GENDER)
        if option.value != OTHER_GENDER
    ] + resolver.options(ValueSetUrl.GENDER_OTHER)

    persons = []
    for fragment in fragments:
        name_fragments = fragment.children_named("name")
        persons.append(
            ContactPerson(
                id=fragment.resource_id,
                role=(
                    check_coding(fragment, "relationship.coding", role_options)
                    or check_coding(fragment, "relationship[0].coding", role_options)
                ),
                gender=_read_gender(fragment, gender_options),
                name=name_from_trees(name_fragments) if name_fragments else None,
                address=addresses_from_trees(fragment.get_repeated("address"), resolver),
                telecom=telecoms_from_trees(fragment.get_repeated("telecom"), resolver),
            )
        )
    return persons
