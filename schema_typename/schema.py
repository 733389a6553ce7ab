"""Schema data types shared by the registry client, parsers, and resolver.

A resolution moves through three shapes:

    RawSchema         - the text the registry stored, plus its format tag
    ParsedDescriptor  - the naming information extracted from that text
    str               - the "<namespace>.<typeName>" result

All of them are immutable and live only for the duration of one call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SchemaFormat(Enum):
    """Schema formats known to the registry."""

    PROTOBUF = "PROTOBUF"
    AVRO = "AVRO"
    JSON = "JSON"

    @classmethod
    def from_registry(cls, schema_type: Optional[str]) -> "SchemaFormat":
        """Map a registry ``schemaType`` tag to a format.

        The registry leaves the tag out for Avro schemas, so a missing
        or empty tag means Avro.

        Raises:
            ValueError: If the tag names no known format.
        """
        if not schema_type:
            return cls.AVRO
        return cls(schema_type.upper())


@dataclass(frozen=True)
class RawSchema:
    """Schema text as stored in the registry."""

    schema_str: str
    format: SchemaFormat


@dataclass(frozen=True)
class ParsedDescriptor:
    """Naming information extracted from a schema.

    Attributes:
        package: Declared package, empty when the schema declares none.
        namespace_option: Format-specific namespace override, None when unset.
        top_level_type_names: Top-level type names in declaration order.
    """

    package: str = ""
    namespace_option: Optional[str] = None
    top_level_type_names: tuple[str, ...] = ()
