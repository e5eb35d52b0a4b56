"""Practitioner and PractitionerRole converter.

One practitioner object is stored as two resources: the Practitioner holds
the person (name, address, telecom, identifiers, qualification) and the
PractitionerRole holds the role, the specialty and the organization. The
role refers to its practitioner by ``practitioner.reference``.

Both directions start with an explicit join step (``correlate_roles``) that
pairs every practitioner with the first role referring to it. Roles left
over are returned as ignored; they are a data-quality signal, not an error.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, TypeVar

from pio_mapper.converters.address import addresses_from_trees, addresses_to_trees
from pio_mapper.converters.name import name_from_trees, name_to_trees
from pio_mapper.converters.telecom import telecoms_from_trees, telecoms_to_trees
from pio_mapper.document.primitives import CodeValue, StringValue, UriValue, UuidValue, reference_value
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.common import Coding, ConversionResult
from pio_mapper.models.resources import Practitioner, PractitionerRole
from pio_mapper.terminology.codes import check_coding, write_coding
from pio_mapper.terminology.identifier_types import PRACTITIONER_IDENTIFIER_TYPES
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import (
    ADDITIONAL_COMMENT_EXTENSION,
    PRACTITIONER_KEY,
    PRACTITIONER_ROLE_KEY,
    ValueSetUrl,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUALIFICATION_VERSION = "1.3.0"


@dataclass
class PractitionerTrees:
    """Fragments produced for a list of practitioners.

    ``practitioners[i]`` and ``roles[i]`` belong to the same input object.
    """

    practitioners: list[SubTree] = field(default_factory=list)
    roles: list[SubTree] = field(default_factory=list)


def reference_key(reference: Optional[str]) -> Optional[str]:
    """Normalize a uuid reference for comparison (bare, lower-case)."""
    if reference is None:
        return None
    return reference.removeprefix("urn:uuid:").lower()


def role_practitioner_reference(role: SubTree) -> Optional[str]:
    return reference_key(role.get_value_as_string("practitioner.reference"))


def correlate_roles(
    items: list[T], roles: list[SubTree], key: Callable[[T], str]
) -> ConversionResult[tuple[T, Optional[SubTree]]]:
    """Pair every item with the first role whose practitioner reference matches.

    Args:
        items: Practitioner objects or fragments, in output order
        roles: PractitionerRole fragments, in document order
        key: Returns the practitioner id of an item

    Returns:
        ``(item, role or None)`` pairs in item order; roles paired with no
        item are returned as ignored
    """
    pairs: list[tuple[T, Optional[SubTree]]] = []
    used: list[SubTree] = []
    for item in items:
        wanted = reference_key(key(item))
        role = next((role for role in roles if role_practitioner_reference(role) == wanted), None)
        if role is not None and not any(role is seen for seen in used):
            used.append(role)
        pairs.append((item, role))
    unmatched = [role for role in roles if not any(role is seen for seen in used)]
    return ConversionResult(items=pairs, ignored=unmatched)


async def _resolve_with_fallback(
    resolver: TerminologyResolver, url: str, code: str, path: Optional[str], alternate_path: Optional[str]
) -> Optional[Coding]:
    coding = resolver.resolve_by_code(url, code)
    if coding is None and path is not None:
        logger.debug(f"Code {code!r} not in local value set {url}; asking backend")
        coding = await resolver.resolve_by_code_async(path, alternate_path)
    return coding


async def _write_practitioner(
    practitioner: Practitioner, resolver: TerminologyResolver
) -> SubTree:
    fragment = SubTree(join_path(practitioner.id, PRACTITIONER_KEY))

    if practitioner.additional_info:
        fragment.set_value("extension", UriValue(ADDITIONAL_COMMENT_EXTENSION))
        fragment.set_value("extension.valueString", StringValue(practitioner.additional_info))

    if practitioner.qualification:
        coding = await _resolve_with_fallback(
            resolver,
            ValueSetUrl.QUALIFICATION,
            practitioner.qualification,
            join_path(fragment.absolute_path, "qualification.code.coding"),
            join_path(fragment.absolute_path, "qualification[0].code.coding"),
        )
        if coding is not None and coding.version is None:
            coding = dataclasses.replace(coding, version=DEFAULT_QUALIFICATION_VERSION)
        write_coding(fragment, "qualification.code.coding", coding)

    # a practitioner carries the legal name only
    if practitioner.name is not None:
        fragment.add_child(name_to_trees(practitioner.name, fragment.absolute_path)[0])
    for address_fragment in addresses_to_trees(practitioner.address, fragment.absolute_path):
        fragment.add_child(address_fragment)
    for telecom_fragment in telecoms_to_trees(practitioner.telecom, fragment.absolute_path):
        fragment.add_child(telecom_fragment)

    index = 0
    for attribute, identifier_type in PRACTITIONER_IDENTIFIER_TYPES.items():
        value = getattr(practitioner, attribute)
        if not value:
            continue
        path = f"identifier[{index}]"
        fragment.set_value(join_path(path, "use"), CodeValue("official"))
        write_coding(fragment, join_path(path, "type.coding"), identifier_type.coding)
        fragment.set_value(join_path(path, "system"), UriValue(identifier_type.system))
        fragment.set_value(join_path(path, "value"), StringValue(value))
        index += 1
    return fragment


async def _write_role(
    practitioner: Practitioner,
    resolver: TerminologyResolver,
    role_id: str,
    existing: bool,
) -> SubTree:
    fragment = SubTree(join_path(role_id, PRACTITIONER_ROLE_KEY))
    fragment.set_value("practitioner.reference", reference_value(practitioner.id))
    if practitioner.organization:
        fragment.set_value("organization.reference", reference_value(practitioner.organization))

    for code, url, element in (
        (practitioner.role, ValueSetUrl.ROLE_CARE, "code"),
        (practitioner.speciality, ValueSetUrl.SPECIALTY, "specialty"),
    ):
        if not code:
            continue
        # only an existing role can hold a previously stored custom code
        coding = await _resolve_with_fallback(
            resolver,
            url,
            code,
            join_path(fragment.absolute_path, f"{element}.coding") if existing else None,
            join_path(fragment.absolute_path, f"{element}[0].coding") if existing else None,
        )
        write_coding(fragment, f"{element}.coding", coding)
    return fragment


def _new_role_id() -> str:
    return UuidValue.generate().to_string()


async def practitioners_to_trees(
    practitioners: list[Practitioner],
    resolver: TerminologyResolver,
    existing_roles: Optional[list[SubTree]] = None,
    id_factory: Callable[[], str] = _new_role_id,
) -> PractitionerTrees:
    """Convert practitioners into Practitioner and PractitionerRole fragments.

    A role fragment already referring to a practitioner keeps its id, so
    updating a practitioner never orphans or duplicates its role. Other
    practitioners get a freshly minted role id. Practitioners are processed
    one after another, including any backend round trip.

    Args:
        practitioners: Practitioners to convert
        resolver: Terminology resolver for qualification, role and specialty
        existing_roles: Role fragments currently stored in the document
        id_factory: Mints ids for new roles

    Returns:
        Practitioner and role fragments, index-aligned with the input

    Raises:
        TransportError: If a backend fallback lookup fails
    """
    trees = PractitionerTrees()
    correlation = correlate_roles(practitioners, existing_roles or [], key=lambda item: item.id)
    for practitioner, existing_role in correlation.items:
        role_id = existing_role.resource_id if existing_role is not None else id_factory()
        trees.practitioners.append(await _write_practitioner(practitioner, resolver))
        trees.roles.append(
            await _write_role(practitioner, resolver, role_id, existing=existing_role is not None)
        )
        logger.debug(f"Converted practitioner {practitioner.id} with role {role_id}")
    return trees


def role_from_tree(fragment: SubTree, resolver: TerminologyResolver) -> PractitionerRole:
    """Read the stored fields of one PractitionerRole fragment."""
    role_options = resolver.options(ValueSetUrl.ROLE_CARE)
    specialty_options = resolver.options(ValueSetUrl.SPECIALTY)
    return PractitionerRole(
        id=fragment.resource_id,
        practitioner=role_practitioner_reference(fragment),
        organization=fragment.get_value_as_string("organization.reference"),
        role=(
            check_coding(fragment, "code.coding", role_options)
            or check_coding(fragment, "code[0].coding", role_options)
        ),
        speciality=(
            check_coding(fragment, "specialty.coding", specialty_options)
            or check_coding(fragment, "specialty[0].coding", specialty_options)
        ),
    )


def _read_identifier(fragment: SubTree, type_code: str) -> Optional[str]:
    for identifier in fragment.get_repeated("identifier"):
        if identifier.get_value_as_string("type.coding.code") == type_code:
            return identifier.get_value_as_string("value")
    return None


def practitioners_from_trees(
    practitioner_fragments: list[SubTree],
    role_fragments: list[SubTree],
    resolver: TerminologyResolver,
    author_ids: Iterable[str] = (),
) -> ConversionResult[Practitioner]:
    """Merge Practitioner and PractitionerRole fragments into practitioner objects.

    Every practitioner fragment yields one object. Fields from the role stay
    empty when no role refers to the practitioner; if several roles refer to
    it, the first one wins.

    Args:
        practitioner_fragments: Practitioner fragments in any order
        role_fragments: PractitionerRole fragments in any order
        resolver: Terminology resolver
        author_ids: Entity ids listed as document authors

    Returns:
        Practitioner objects, with unmatched role fragments as ignored
    """
    authors = {reference_key(author_id) for author_id in author_ids}
    qualification_options = resolver.options(ValueSetUrl.QUALIFICATION)

    correlation = correlate_roles(
        practitioner_fragments, role_fragments, key=lambda fragment: fragment.resource_id
    )
    known = {reference_key(fragment.resource_id) for fragment in practitioner_fragments}
    duplicates = [role for role in correlation.ignored if role_practitioner_reference(role) in known]
    unmatched = [role for role in correlation.ignored if role_practitioner_reference(role) not in known]
    if unmatched:
        logger.warning(
            f"Ignoring {len(unmatched)} PractitionerRole resources without a matching "
            f"practitioner: {', '.join(role.resource_id for role in unmatched)}"
        )
    if duplicates:
        logger.warning(
            f"Ignoring {len(duplicates)} duplicate PractitionerRole resources of practitioners "
            f"that already have a role: {', '.join(role.resource_id for role in duplicates)}"
        )

    practitioners = []
    for fragment, role_fragment in correlation.items:
        role = role_from_tree(role_fragment, resolver) if role_fragment is not None else None
        name_fragments = fragment.children_named("name")
        practitioners.append(
            Practitioner(
                id=fragment.resource_id,
                organization=(role.organization or "") if role is not None else "",
                additional_info=(
                    fragment.get_value_as_string("extension.valueString")
                    or fragment.get_value_as_string("extension[0].valueString")
                ),
                qualification=(
                    check_coding(fragment, "qualification.code.coding", qualification_options)
                    or check_coding(fragment, "qualification[0].code.coding", qualification_options)
                ),
                role=role.role if role is not None else None,
                speciality=role.speciality if role is not None else None,
                name=name_from_trees(name_fragments) if name_fragments else None,
                address=addresses_from_trees(fragment.get_repeated("address"), resolver),
                telecom=telecoms_from_trees(fragment.get_repeated("telecom"), resolver),
                anr=_read_identifier(fragment, PRACTITIONER_IDENTIFIER_TYPES["anr"].coding.code),
                efn=_read_identifier(fragment, PRACTITIONER_IDENTIFIER_TYPES["efn"].coding.code),
                zanr=_read_identifier(fragment, PRACTITIONER_IDENTIFIER_TYPES["zanr"].coding.code),
                author=reference_key(fragment.resource_id) in authors,
            )
        )
    return ConversionResult(items=practitioners, ignored=correlation.ignored)
