"""Error types for schema type name resolution."""

from typing import Optional


class ResolverError(Exception):
    """Base class for resolution errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class SchemaNotFoundError(ResolverError):
    """The registry has no schema for the requested id."""

    def __init__(self, schema_id: int, cause: Optional[Exception] = None):
        super().__init__(f"schema not found: {schema_id}", cause)
        self.schema_id = schema_id


class RegistryUnavailableError(ResolverError):
    """The registry could not be reached or failed to answer."""

    def __init__(self, cause: Exception):
        super().__init__("registry unavailable", cause)


class DescriptorParseError(ResolverError):
    """Schema text does not decode as a descriptor of its declared format."""

    def __init__(self, fmt: str, cause: Optional[Exception] = None):
        super().__init__(f"invalid {fmt} descriptor", cause)
        self.format = fmt


class UnsupportedFormatError(ResolverError):
    """No descriptor parser is registered for the schema format."""

    def __init__(self, fmt: str):
        super().__init__(f"unsupported schema format: {fmt}")
        self.format = fmt
