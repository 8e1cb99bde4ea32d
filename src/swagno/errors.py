"""Exception hierarchy for swagno.

Document generation raises for inputs it cannot reflect over; the
security, callback and link objects raise SpecValidationError subclasses
from their check() methods.
"""


class SwagnoError(Exception):
    """Base class for every error raised by swagno."""


class SchemaGenerationError(SwagnoError):
    """A value could not be turned into a schema."""


class UnsupportedTypeError(SchemaGenerationError):
    """A type has no JSON schema counterpart."""

    def __init__(self, tp: object):
        self.tp = tp
        super().__init__(f"unsupported type: {tp!r}")


class ExportError(SwagnoError):
    """Serialising or writing a document failed."""


class SpecValidationError(SwagnoError):
    """An object violates an OpenAPI / Swagger rule."""


class SecuritySchemeError(SpecValidationError):
    pass


class RuntimeExpressionError(SpecValidationError):
    pass


class LinkError(SpecValidationError):
    pass


class ExternalDocsError(SpecValidationError):
    pass


class ConfigError(SwagnoError):
    """A configuration file could not be read or is invalid."""
