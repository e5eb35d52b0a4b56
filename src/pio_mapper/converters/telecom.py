"""Telecom (contact point) converter."""

import logging

from pio_mapper.document.primitives import CodeValue, StringValue
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.common import Telecom
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import ValueSetUrl

logger = logging.getLogger(__name__)


def telecoms_to_trees(telecoms: list[Telecom], base_path: str) -> list[SubTree]:
    """Convert contact points into ``telecom[n]`` fragments below ``base_path``.

    Entries with an empty or blank value are skipped and the remaining
    entries are indexed without gaps.
    """
    fragments = []
    for telecom in telecoms:
        if not telecom.value or not telecom.value.strip():
            logger.debug(f"Skipping telecom entry without value (system={telecom.system!r})")
            continue
        fragment = SubTree(join_path(base_path, f"telecom[{len(fragments)}]"))
        if telecom.system:
            fragment.set_value("system", CodeValue(telecom.system))
        fragment.set_value("value", StringValue(telecom.value))
        fragments.append(fragment)
    return fragments


def telecoms_from_trees(fragments: list[SubTree], resolver: TerminologyResolver) -> list[Telecom]:
    """Rebuild contact points; the label is the display of the system code."""
    labels = {option.value: option.label for option in resolver.options(ValueSetUrl.CONTACT_POINT_SYSTEM)}
    telecoms = []
    for fragment in fragments:
        system = fragment.get_value_as_string("system") or ""
        telecoms.append(
            Telecom(
                system=system,
                value=fragment.get_value_as_string("value") or "",
                label=labels.get(system, ""),
            )
        )
    return telecoms
