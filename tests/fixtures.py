"""Shared schema fixtures for resolver tests.

Protobuf schemas are built from real FileDescriptorProto messages and
encoded the way the registry serves them with fmt="serialized".
"""

import base64
import json
from typing import Callable, Optional
from unittest.mock import Mock

from google.protobuf import descriptor_pb2

from schema_typename.errors import SchemaNotFoundError
from schema_typename.registry import RegistryClient
from schema_typename.schema import RawSchema, SchemaFormat

MESSAGE_TYPE_NAME = "TestMessage"

# Length-delimited package field claiming 5 bytes but carrying 2.
TRUNCATED_DESCRIPTOR = base64.b64encode(b"\x12\x05ab").decode()


def protobuf_schema(
    configure: Optional[Callable[[descriptor_pb2.FileDescriptorProto], None]] = None,
) -> RawSchema:
    """Build a protobuf RawSchema declaring one TestMessage type."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        message_type=[descriptor_pb2.DescriptorProto(name=MESSAGE_TYPE_NAME)],
    )
    if configure is not None:
        configure(file_proto)
    return RawSchema(
        schema_str=base64.b64encode(file_proto.SerializeToString()).decode(),
        format=SchemaFormat.PROTOBUF,
    )


def avro_schema(schema: object) -> RawSchema:
    return RawSchema(schema_str=json.dumps(schema), format=SchemaFormat.AVRO)


def registry_mock(schemas: dict[int, RawSchema]) -> Mock:
    """Mock RegistryClient serving the given schemas by id."""

    def fetch_schema(schema_id: int, subject_hint: str) -> RawSchema:
        if schema_id not in schemas:
            raise SchemaNotFoundError(schema_id)
        return schemas[schema_id]

    client = Mock(spec=RegistryClient)
    client.fetch_schema.side_effect = fetch_schema
    return client
