"""Resource converters between domain objects and document tree fragments.

Every converter comes as a pair: ``*_to_tree(s)`` writes fragments rooted at
the resource's path, ``*_from_tree(s)`` reads them back. Converters for
composite resources delegate to the name, address, telecom and extension
converters.
"""

from pio_mapper.converters.address import addresses_from_trees, addresses_to_trees
from pio_mapper.converters.contact_person import (
    contact_persons_from_trees,
    contact_persons_to_trees,
)
from pio_mapper.converters.extension import (
    PATIENT_EXTENSION_URLS,
    extensions_from_tree,
    extensions_to_tree,
    filter_recognized_extensions,
)
from pio_mapper.converters.labels import address_label, name_label, telecom_label
from pio_mapper.converters.name import name_from_trees, name_to_trees
from pio_mapper.converters.organization import organizations_from_trees, organizations_to_trees
from pio_mapper.converters.practitioner import (
    PractitionerTrees,
    correlate_roles,
    practitioners_from_trees,
    practitioners_to_trees,
)
from pio_mapper.converters.telecom import telecoms_from_trees, telecoms_to_trees

__all__ = [
    "PATIENT_EXTENSION_URLS",
    "PractitionerTrees",
    "address_label",
    "addresses_from_trees",
    "addresses_to_trees",
    "contact_persons_from_trees",
    "contact_persons_to_trees",
    "correlate_roles",
    "extensions_from_tree",
    "extensions_to_tree",
    "filter_recognized_extensions",
    "name_from_trees",
    "name_label",
    "name_to_trees",
    "organizations_from_trees",
    "organizations_to_trees",
    "practitioners_from_trees",
    "practitioners_to_trees",
    "telecom_label",
    "telecoms_from_trees",
    "telecoms_to_trees",
]
