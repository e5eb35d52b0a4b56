"""Primitive data types stored as leaf values in the document tree.

Each primitive knows its FHIR type tag (``String``, ``Uri``, ``Code``,
``Uuid``, ``Boolean``) and how to parse itself from, and render itself to,
its textual representation. The type tag is what appears after ``value``
in extension element names, e.g. ``valueString`` or ``valueCode``.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import ClassVar, Union

from pio_mapper.utils.exceptions import PrimitiveValueError

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"^[^\s]+( [^\s]+)*$")
_UUID_PREFIX = "urn:uuid:"


@dataclass(frozen=True)
class StringValue:
    """Plain FHIR string."""

    value: str
    type_name: ClassVar[str] = "String"

    @classmethod
    def parse_from_string(cls, text: str) -> "StringValue":
        return cls(text)

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class UriValue:
    """FHIR uri. Must not contain whitespace."""

    value: str
    type_name: ClassVar[str] = "Uri"

    def __post_init__(self) -> None:
        if not self.value or any(ch.isspace() for ch in self.value):
            raise PrimitiveValueError(
                f"Invalid uri: {self.value!r}. A uri must be non-empty and contain no whitespace."
            )

    @classmethod
    def parse_from_string(cls, text: str) -> "UriValue":
        return cls(text)

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class CodeValue:
    """FHIR code: tokens separated by single spaces."""

    value: str
    type_name: ClassVar[str] = "Code"

    def __post_init__(self) -> None:
        if not _CODE_PATTERN.match(self.value):
            raise PrimitiveValueError(
                f"Invalid code: {self.value!r}. Codes must not be empty or contain "
                f"leading, trailing or repeated whitespace."
            )

    @classmethod
    def parse_from_string(cls, text: str) -> "CodeValue":
        return cls(text)

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class UuidValue:
    """Reference to another resource by its uuid.

    Accepts the bare form and the ``urn:uuid:`` form, always stores the
    bare, lower-case form.
    """

    value: str
    type_name: ClassVar[str] = "Uuid"

    def __post_init__(self) -> None:
        raw = self.value[len(_UUID_PREFIX):] if self.value.startswith(_UUID_PREFIX) else self.value
        try:
            normalized = str(uuid.UUID(raw))
        except (ValueError, AttributeError, TypeError) as e:
            raise PrimitiveValueError(
                f"Invalid uuid reference: {self.value!r}. Fix: pass a canonical uuid string."
            ) from e
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse_from_string(cls, text: str) -> "UuidValue":
        return cls(text)

    @classmethod
    def generate(cls) -> "UuidValue":
        """Mint a fresh random (version 4) uuid."""
        return cls(str(uuid.uuid4()))

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class BooleanValue:
    """FHIR boolean, rendered as lower-case ``true``/``false``."""

    value: bool
    type_name: ClassVar[str] = "Boolean"

    @classmethod
    def parse_from_string(cls, text: str) -> "BooleanValue":
        lowered = text.strip().lower()
        if lowered not in ("true", "false"):
            raise PrimitiveValueError(f"Invalid boolean: {text!r}. Must be 'true' or 'false'.")
        return cls(lowered == "true")

    def to_string(self) -> str:
        return "true" if self.value else "false"


PrimitiveValue = Union[StringValue, UriValue, CodeValue, UuidValue, BooleanValue]

PRIMITIVE_TYPES: dict[str, type] = {
    cls.type_name: cls for cls in (StringValue, UriValue, CodeValue, UuidValue, BooleanValue)
}


def parse_primitive(type_name: str, text: str) -> PrimitiveValue:
    """Parse ``text`` as the primitive identified by ``type_name``.

    Args:
        type_name: Type tag such as ``String`` or ``Code``
        text: Textual representation of the value

    Returns:
        Parsed primitive value

    Raises:
        PrimitiveValueError: If the type tag is unknown or the text is malformed
    """
    try:
        primitive_cls = PRIMITIVE_TYPES[type_name]
    except KeyError:
        raise PrimitiveValueError(
            f"Unknown primitive type: {type_name!r}. "
            f"Must be one of: {', '.join(PRIMITIVE_TYPES)}"
        ) from None
    return primitive_cls.parse_from_string(text)


def reference_value(reference: str) -> Union[UuidValue, StringValue]:
    """Wrap a resource reference as a leaf value.

    Entity keys are usually uuids and are stored as ``Uuid``. Other keys,
    such as ``o1``, are kept as plain strings instead of failing the write.
    """
    try:
        return UuidValue(reference)
    except PrimitiveValueError:
        logger.debug(f"Reference {reference!r} is not a uuid; storing it as a string")
        return StringValue(reference)
