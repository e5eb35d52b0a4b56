"""Extension codec.

Each extension is stored as ``extension[n]`` holding the extension URL,
with a single child ``value<Type>`` holding the typed value, e.g.::

    <uuid>.KBV_PR_MIO_ULB_Patient.extension[0]             = Uri(".../KBV_EX_MIO_ULB_Religion")
    <uuid>.KBV_PR_MIO_ULB_Patient.extension[0].valueString = String("evangelisch")
"""

import logging
from typing import Iterable, Optional

from pio_mapper.document.primitives import UriValue, parse_primitive
from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import ConversionResult, Extension
from pio_mapper.terminology.urls import PatientExtension

logger = logging.getLogger(__name__)

VALUE_PREFIX = "value"

PATIENT_EXTENSION_URLS = (
    PatientExtension.RELIGION,
    PatientExtension.INTERPRETER_REQUIRED,
    PatientExtension.COMMUNICATION_NOTES,
)


def extensions_to_tree(extensions: list[Extension], base_path: str) -> SubTree:
    """Convert extensions into a container node at ``base_path``.

    Args:
        extensions: Extensions in emission order
        base_path: Absolute path of the element owning the extensions

    Returns:
        Node at ``base_path`` whose children are the ``extension[n]`` elements

    Raises:
        PrimitiveValueError: If a value does not parse as its type tag
    """
    container = SubTree(base_path)
    for index, extension in enumerate(extensions):
        path = f"extension[{index}]"
        container.set_value(path, UriValue(extension.url))
        container.set_value(
            f"{path}.{VALUE_PREFIX}{extension.data_type}",
            parse_primitive(extension.data_type, extension.value),
        )
    return container


def _value_child(extension: SubTree) -> Optional[SubTree]:
    for child in extension.children:
        if child.field.startswith(VALUE_PREFIX):
            return child
    return None


def extensions_from_tree(owner: SubTree) -> list[Extension]:
    """Read all extensions of ``owner``, fixed and indexed representations alike."""
    extensions = []
    for node in owner.get_repeated("extension"):
        url = node.get_value_as_string()
        value_node = _value_child(node)
        if url is None or value_node is None:
            logger.debug(f"Skipping incomplete extension at {node.absolute_path}")
            continue
        extensions.append(
            Extension(
                url=url,
                value=value_node.get_value_as_string() or "",
                data_type=value_node.field[len(VALUE_PREFIX):],
            )
        )
    return extensions


def filter_recognized_extensions(
    extensions: list[Extension], recognized_urls: Iterable[str] = PATIENT_EXTENSION_URLS
) -> ConversionResult[Extension]:
    """Keep the first occurrence of each recognized URL, in the order of ``recognized_urls``.

    Later duplicates and extensions with unrecognized URLs are returned as
    ignored.
    """
    kept: list[Extension] = []
    for url in recognized_urls:
        first = next((extension for extension in extensions if extension.url == url), None)
        if first is not None:
            kept.append(first)
    ignored = [extension for extension in extensions if not any(extension is item for item in kept)]
    if ignored:
        logger.debug(f"Ignoring {len(ignored)} duplicate or unrecognized extensions")
    return ConversionResult(items=kept, ignored=ignored)
