"""Human name converter.

A name is stored as one ``name`` element, or as ``name[0]`` (legal name) and
``name[1]`` (birth name) when a maiden name is present. The family name
parts are carried as extensions below ``family`` so that the particle and
the addition survive a round trip; ``family`` and ``text`` hold the
concatenated, human-readable strings.
"""

import logging
from typing import Optional

from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.common import MaidenName, Name
from pio_mapper.terminology.urls import NameExtension

logger = logging.getLogger(__name__)

OFFICIAL_USE = "official"
MAIDEN_USE = "maiden"
ACADEMIC_TITLE_QUALIFIER = "AC"


def family_string(family_name: str, particle: Optional[str] = None, addition: Optional[str] = None) -> str:
    """Concatenate particle, addition and family name, skipping absent parts.

    Example:
        >>> family_string("Bergen", particle="von", addition="Graf")
        'von Graf Bergen'
    """
    return " ".join(part for part in (particle, addition, family_name) if part)


def name_text(family: str, prefix: Optional[str] = None, given: Optional[str] = None) -> str:
    """Build the display text ``prefix family, given``."""
    text = f"{prefix} {family}" if prefix else family
    if given:
        text = f"{text}, {given}"
    return text


def _write_family(fragment: SubTree, family_name: str, particle: Optional[str], addition: Optional[str]) -> str:
    parts = [
        (NameExtension.OWN_NAME, family_name),
        (NameExtension.ADDITION, addition),
        (NameExtension.PARTICLE, particle),
    ]
    index = 0
    for url, value in parts:
        # own name is always written, even when empty
        if url != NameExtension.OWN_NAME and not value:
            continue
        extension_path = f"family.extension[{index}]"
        fragment.set_value(extension_path, UriValue(url))
        fragment.set_value(join_path(extension_path, "valueString"), StringValue(value or ""))
        index += 1

    family = family_string(family_name, particle, addition)
    fragment.set_value("family", StringValue(family))
    return family


def name_to_trees(name: Name, base_path: str) -> list[SubTree]:
    """Convert a name into one or two ``name`` fragments below ``base_path``.

    Args:
        name: Name to convert
        base_path: Absolute path of the owning resource, e.g. ``<uuid>.<ResourceKey>``

    Returns:
        The legal name fragment, followed by the birth name fragment if
        ``name.maiden_name`` is set
    """
    has_maiden = name.maiden_name is not None
    fragment = SubTree(join_path(base_path, "name[0]" if has_maiden else "name"))

    fragment.set_value("use", CodeValue(OFFICIAL_USE))
    if name.given_name:
        fragment.set_value("given", StringValue(name.given_name))
    if name.prefix:
        fragment.set_value("prefix", StringValue(name.prefix))
        fragment.set_value("prefix.extension[0]", UriValue(NameExtension.QUALIFIER))
        fragment.set_value("prefix.extension[0].valueCode", CodeValue(ACADEMIC_TITLE_QUALIFIER))

    family = _write_family(fragment, name.family_name, name.particle, name.addition)
    fragment.set_value("text", StringValue(name_text(family, name.prefix, name.given_name)))
    fragments = [fragment]

    if has_maiden:
        maiden = name.maiden_name
        maiden_fragment = SubTree(join_path(base_path, "name[1]"))
        maiden_fragment.set_value("use", CodeValue(MAIDEN_USE))
        maiden_family = _write_family(
            maiden_fragment, maiden.family_name, maiden.particle, maiden.addition
        )
        maiden_fragment.set_value("text", StringValue(maiden_family))
        fragments.append(maiden_fragment)

    return fragments


def _read_family_part(fragment: SubTree, url: str) -> Optional[str]:
    for extension in fragment.get_repeated("family.extension"):
        if extension.get_value_as_string() == url:
            return extension.get_value_as_string("valueString")
    return None


def name_from_trees(fragments: list[SubTree]) -> Name:
    """Rebuild a name from its ``name`` fragments.

    A fragment with use ``maiden`` fills the birth name, any other fragment
    the legal name. Without a legal name fragment the family name is empty.
    """
    name = Name()
    for fragment in fragments:
        family_name = _read_family_part(fragment, NameExtension.OWN_NAME) or ""
        particle = _read_family_part(fragment, NameExtension.PARTICLE)
        addition = _read_family_part(fragment, NameExtension.ADDITION)

        if fragment.get_value_as_string("use") == MAIDEN_USE:
            name.maiden_name = MaidenName(family_name=family_name, particle=particle, addition=addition)
        else:
            name.family_name = family_name
            name.particle = particle
            name.addition = addition
            name.given_name = fragment.get_value_as_string("given")
            name.prefix = fragment.get_value_as_string("prefix")

    if not any(fragment.get_value_as_string("use") != MAIDEN_USE for fragment in fragments):
        logger.debug("No legal name fragment found; family name left empty")
    return name
