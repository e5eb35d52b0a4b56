"""Custom exception classes for the PIO resource mapper.

All exceptions inherit from PIOMapperError to allow catching all custom exceptions.
"""


class PIOMapperError(Exception):
    """Base exception for all PIO mapper custom exceptions."""

    pass


class ValidationError(PIOMapperError):
    """Raised when data validation fails.

    Examples:
        - Malformed document tree path
        - Primitive value that does not match its type
        - Invalid domain object content
    """

    pass


class TreePathError(ValidationError):
    """Raised when a document tree path cannot be parsed.

    Examples:
        - Empty path segment ("name..given")
        - Malformed index ("identifier[a]")
        - Grafting a fragment that is not a direct child path
    """

    pass


class PrimitiveValueError(ValidationError):
    """Raised when a primitive value cannot be parsed or is unknown.

    Examples:
        - Unknown type tag ("valueFoo")
        - Malformed UUID reference
        - Whitespace inside a URI
    """

    pass


class ConfigurationError(PIOMapperError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Configuration value out of range
        - Value set file that cannot be read
    """

    pass


class TransportError(PIOMapperError):
    """Raised when network/transport issues occur.

    Examples:
        - Connection timeout
        - HTTP error responses
        - Network unreachable
    """

    pass


class BackendError(TransportError):
    """Raised when the document backend answers but reports a failure.

    Examples:
        - ``success`` flag false in the response body
        - Response body that is not JSON
    """

    pass


class TerminologyError(PIOMapperError):
    """Base exception for terminology lookups."""

    pass


class ValueSetNotFoundError(TerminologyError):
    """Raised when a value set URL is not present in the lookup table."""

    pass


class IdentifierLookupError(TerminologyError):
    """Raised when an organization identifier label is not in the identifier-type table.

    The organization conversion that triggered it is failed as a whole;
    no partial fragment is returned.
    """

    pass
