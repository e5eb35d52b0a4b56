"""Document tree and primitive value types."""

from pio_mapper.document.primitives import (
    BooleanValue,
    CodeValue,
    PrimitiveValue,
    StringValue,
    UriValue,
    UuidValue,
    parse_primitive,
)
from pio_mapper.document.tree import SubTree, join_path, split_path

__all__ = [
    "BooleanValue",
    "CodeValue",
    "PrimitiveValue",
    "StringValue",
    "SubTree",
    "UriValue",
    "UuidValue",
    "join_path",
    "parse_primitive",
    "split_path",
]
