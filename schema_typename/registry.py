"""Schema registry clients.

The resolver only needs a fetch-by-id capability, described by the
RegistryClient protocol. ConfluentRegistryClient provides it on top of
the Confluent Schema Registry REST client.
"""

import os
from typing import Optional, Protocol

import httpx
import structlog
from confluent_kafka.schema_registry import SchemaRegistryClient
from confluent_kafka.schema_registry.error import SchemaRegistryError

from .errors import (
    RegistryUnavailableError,
    SchemaNotFoundError,
    UnsupportedFormatError,
)
from .schema import RawSchema, SchemaFormat

logger = structlog.get_logger()

DEFAULT_REGISTRY_URL = "http://localhost:8081"
REGISTRY_URL_ENV = "SCHEMA_REGISTRY_URL"
BASIC_AUTH_ENV = "SCHEMA_REGISTRY_BASIC_AUTH"

# Registry error code for an unknown schema id.
SCHEMA_NOT_FOUND_CODE = 40403


class RegistryClient(Protocol):
    """Fetch-by-id access to a schema registry.

    Implementations must be safe to call concurrently and must raise
    SchemaNotFoundError or RegistryUnavailableError rather than
    transport-specific exceptions.
    """

    def fetch_schema(self, schema_id: int, subject_hint: str) -> RawSchema: ...


class ConfluentRegistryClient:
    """RegistryClient backed by confluent_kafka's SchemaRegistryClient."""

    def __init__(self, client: SchemaRegistryClient):
        self._client = client

    @classmethod
    def connect(
        cls, url: str, basic_auth: Optional[str] = None
    ) -> "ConfluentRegistryClient":
        """Create a client for the registry at the given URL.

        Args:
            url: Registry base URL.
            basic_auth: Optional "user:password" credentials.
        """
        conf = {"url": url}
        if basic_auth:
            conf["basic.auth.user.info"] = basic_auth
        return cls(SchemaRegistryClient(conf))

    @classmethod
    def from_env(
        cls,
        env_var: str = REGISTRY_URL_ENV,
        default: str = DEFAULT_REGISTRY_URL,
    ) -> "ConfluentRegistryClient":
        """Connect using an environment variable with fallback."""
        url = os.environ.get(env_var, default)
        return cls.connect(url, os.environ.get(BASIC_AUTH_ENV))

    def fetch_schema(self, schema_id: int, subject_hint: str) -> RawSchema:
        """Fetch the schema registered under schema_id.

        Args:
            schema_id: Registry schema id.
            subject_hint: Passed through as the registry's format argument
                ("serialized" asks for protobuf descriptors in binary form).

        Raises:
            SchemaNotFoundError: The id is unknown to the registry.
            RegistryUnavailableError: The registry could not answer.
            UnsupportedFormatError: The schema carries an unknown format tag.
        """
        try:
            schema = self._client.get_schema(schema_id, fmt=subject_hint)
        except SchemaRegistryError as e:
            if _is_not_found(e):
                raise SchemaNotFoundError(schema_id, e) from e
            logger.warning("schema_fetch_failed", schema_id=schema_id, error=str(e))
            raise RegistryUnavailableError(e) from e
        except (httpx.HTTPError, OSError) as e:
            logger.warning("schema_fetch_failed", schema_id=schema_id, error=str(e))
            raise RegistryUnavailableError(e) from e

        try:
            fmt = SchemaFormat.from_registry(schema.schema_type)
        except ValueError:
            raise UnsupportedFormatError(str(schema.schema_type)) from None
        return RawSchema(schema_str=schema.schema_str, format=fmt)


def _is_not_found(error: SchemaRegistryError) -> bool:
    return (
        error.error_code == SCHEMA_NOT_FOUND_CODE or error.http_status_code == 404
    )
