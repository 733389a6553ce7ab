"""Resolve message type names from schema registry ids."""

from .errors import (
    ResolverError,
    SchemaNotFoundError,
    RegistryUnavailableError,
    DescriptorParseError,
    UnsupportedFormatError,
)
from .schema import SchemaFormat, RawSchema, ParsedDescriptor
from .parsers import (
    DescriptorParser,
    ProtobufDescriptorParser,
    AvroDescriptorParser,
    DEFAULT_PARSERS,
    parser_for,
)
from .registry import RegistryClient, ConfluentRegistryClient
from .resolver import (
    TypeNameResolver,
    CachedTypeNameResolver,
    DEFAULT_SUBJECT_HINT,
    select_namespace,
    first_type_name,
    build_type_name,
)

__all__ = [
    # Errors
    "ResolverError",
    "SchemaNotFoundError",
    "RegistryUnavailableError",
    "DescriptorParseError",
    "UnsupportedFormatError",
    # Schema types
    "SchemaFormat",
    "RawSchema",
    "ParsedDescriptor",
    # Parsers
    "DescriptorParser",
    "ProtobufDescriptorParser",
    "AvroDescriptorParser",
    "DEFAULT_PARSERS",
    "parser_for",
    # Registry
    "RegistryClient",
    "ConfluentRegistryClient",
    # Resolver
    "TypeNameResolver",
    "CachedTypeNameResolver",
    "DEFAULT_SUBJECT_HINT",
    "select_namespace",
    "first_type_name",
    "build_type_name",
]
