"""Descriptor parsers, one per schema format.

Each parser turns a RawSchema into a ParsedDescriptor and nothing more:
no validation beyond what decoding requires, no compilation.

Example::

    from schema_typename import parsers

    parser = parsers.parser_for(raw.format)
    descriptor = parser.parse(raw)
"""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping, Optional, Protocol

from google.protobuf import descriptor_pb2
from google.protobuf.descriptor import FieldDescriptor
from google.protobuf.message import DecodeError

from .errors import DescriptorParseError, UnsupportedFormatError
from .schema import ParsedDescriptor, RawSchema, SchemaFormat

__all__ = [
    "DescriptorParser",
    "ProtobufDescriptorParser",
    "AvroDescriptorParser",
    "DEFAULT_PARSERS",
    "parser_for",
]

DEFAULT_NAMESPACE_OPTION = "csharp_namespace"

AVRO_NAMED_TYPES = frozenset({"record", "error", "enum", "fixed"})


class DescriptorParser(Protocol):
    """Extracts naming information from one schema format."""

    def parse(self, raw: RawSchema) -> ParsedDescriptor: ...


class ProtobufDescriptorParser:
    """Parses base64-encoded serialized FileDescriptorProto schemas.

    Args:
        namespace_option: Name of the string FileOptions field used as the
            namespace when the file declares no package.

    Raises:
        ValueError: If namespace_option is not a string field of FileOptions.
    """

    def __init__(self, namespace_option: str = DEFAULT_NAMESPACE_OPTION) -> None:
        fields = descriptor_pb2.FileOptions.DESCRIPTOR.fields_by_name
        if (
            namespace_option not in fields
            or fields[namespace_option].type != FieldDescriptor.TYPE_STRING
        ):
            raise ValueError(
                f"{namespace_option!r} is not a string field of FileOptions"
            )
        self._namespace_option = namespace_option

    @property
    def namespace_option(self) -> str:
        return self._namespace_option

    def parse(self, raw: RawSchema) -> ParsedDescriptor:
        try:
            data = base64.b64decode(raw.schema_str, validate=True)
            file_proto = descriptor_pb2.FileDescriptorProto.FromString(data)
        except (ValueError, DecodeError) as e:
            raise DescriptorParseError(SchemaFormat.PROTOBUF.value, e) from e

        option: Optional[str] = None
        if file_proto.HasField("options"):
            option = getattr(file_proto.options, self._namespace_option) or None

        names = tuple(m.name for m in file_proto.message_type)
        # Invalid UTF-8 in a proto2 string field decodes to bytes.
        for value in (file_proto.package, option, *names):
            if value is not None and not isinstance(value, str):
                raise DescriptorParseError(
                    SchemaFormat.PROTOBUF.value,
                    ValueError(f"name is not valid UTF-8: {value!r}"),
                )

        return ParsedDescriptor(
            package=file_proto.package,
            namespace_option=option,
            top_level_type_names=names,
        )


class AvroDescriptorParser:
    """Parses Avro schema JSON.

    A named type contributes its own name. A top-level union contributes
    every named member in order, with the package taken from the first.
    A fully-qualified name ("com.example.Order") overrides the namespace
    attribute, as in the Avro specification. Avro has no namespace option.
    """

    def parse(self, raw: RawSchema) -> ParsedDescriptor:
        try:
            schema = json.loads(raw.schema_str)
        except ValueError as e:
            raise DescriptorParseError(SchemaFormat.AVRO.value, e) from e

        if isinstance(schema, list):
            members = schema
        elif isinstance(schema, (dict, str)):
            members = [schema]
        else:
            raise DescriptorParseError(
                SchemaFormat.AVRO.value,
                ValueError(f"not an Avro schema: {type(schema).__name__}"),
            )

        package = ""
        names: list[str] = []
        for member in members:
            qualified = _avro_named_type(member)
            if qualified is None:
                continue
            namespace, name = qualified
            if not names:
                package = namespace
            names.append(name)

        return ParsedDescriptor(package=package, top_level_type_names=tuple(names))


def _avro_named_type(schema: Any) -> Optional[tuple[str, str]]:
    """Return (namespace, name) for a named Avro type, None otherwise."""
    if not isinstance(schema, dict):
        return None
    type_ = schema.get("type")
    if isinstance(type_, dict):
        return _avro_named_type(type_)
    if not isinstance(type_, str) or type_ not in AVRO_NAMED_TYPES:
        return None
    name = schema.get("name")
    if not isinstance(name, str):
        raise DescriptorParseError(
            SchemaFormat.AVRO.value,
            ValueError(f"{schema.get('type')} schema has no name"),
        )
    if "." in name:
        namespace, name = name.rsplit(".", 1)
        return namespace, name
    namespace = schema.get("namespace") or ""
    if not isinstance(namespace, str):
        raise DescriptorParseError(
            SchemaFormat.AVRO.value, ValueError("namespace must be a string")
        )
    return namespace, name


DEFAULT_PARSERS: Mapping[SchemaFormat, DescriptorParser] = {
    SchemaFormat.PROTOBUF: ProtobufDescriptorParser(),
    SchemaFormat.AVRO: AvroDescriptorParser(),
}


def parser_for(
    fmt: SchemaFormat,
    parsers: Optional[Mapping[SchemaFormat, DescriptorParser]] = None,
) -> DescriptorParser:
    """Select the parser registered for a schema format.

    Args:
        fmt: Format tag carried by the schema.
        parsers: Parser table to search, DEFAULT_PARSERS when omitted.

    Raises:
        UnsupportedFormatError: If no parser is registered for the format.
    """
    table = DEFAULT_PARSERS if parsers is None else parsers
    try:
        return table[fmt]
    except KeyError:
        raise UnsupportedFormatError(fmt.value) from None
