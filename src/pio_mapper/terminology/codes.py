"""Reading and writing codings in the document tree."""

import logging
from typing import Optional

from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.common import Coding
from pio_mapper.terminology.value_sets import SelectOption

logger = logging.getLogger(__name__)


def write_coding(tree: SubTree, path: str, coding: Optional[Coding]) -> None:
    """Write a FHIR coding element below ``path``; a None coding writes nothing.

    Args:
        tree: Tree to write to
        path: Path ending with ``coding`` relative to ``tree``
        coding: Coding to write
    """
    if coding is None:
        return
    if coding.system:
        tree.set_value(join_path(path, "system"), UriValue(coding.system))
    if coding.version:
        tree.set_value(join_path(path, "version"), StringValue(coding.version))
    tree.set_value(join_path(path, "code"), CodeValue(coding.code))
    if coding.display:
        tree.set_value(join_path(path, "display"), StringValue(coding.display))


def read_coding(tree: SubTree, path: str) -> Optional[Coding]:
    """Read the coding element at ``path``; None if no code is stored."""
    node = tree.get_sub_tree(path)
    code = node.get_value_as_string("code")
    if code is None:
        return None
    return Coding(
        code=code,
        display=node.get_value_as_string("display"),
        system=node.get_value_as_string("system"),
        version=node.get_value_as_string("version"),
    )


def check_code(code: Optional[str], options: list[SelectOption]) -> Optional[str]:
    """Validate a code against drop-down options.

    Known codes are returned unchanged. Unknown codes are returned raw so
    that they survive a round trip; the mismatch is logged.
    """
    if not code:
        return None
    if not any(option.value == code for option in options):
        logger.debug(f"Code {code!r} is not a supported option; keeping raw value")
    return code


def check_coding(tree: SubTree, path: str, options: list[SelectOption]) -> Optional[str]:
    """Read the code of the coding at ``path`` and validate it against ``options``."""
    code_path = join_path(path, "code")
    return check_code(tree.get_value_as_string(code_path), options)
