"""Type name resolution from schema registry ids.

TypeNameResolver maps a schema id to "<namespace>.<typeName>":

- namespace is the declared package, else the namespace option, else ""
- typeName is the first top-level type declared, else ""

The separator is always emitted, so a schema with no package and no
option resolves to ".TypeName", and a schema with nothing at all to ".".
Consumers use the result as a key into their own type registry.

Example::

    from schema_typename import ConfluentRegistryClient, TypeNameResolver

    resolver = TypeNameResolver(ConfluentRegistryClient.from_env())
    resolver.resolve(42)  # "orders.OrderCreated"
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Mapping, Optional

import structlog

from .errors import DescriptorParseError
from .parsers import DescriptorParser, parser_for
from .registry import RegistryClient
from .schema import ParsedDescriptor, SchemaFormat

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Format argument that makes the registry return protobuf schemas as
# base64 serialized FileDescriptorProto instead of .proto text.
DEFAULT_SUBJECT_HINT = "serialized"


def select_namespace(descriptor: ParsedDescriptor) -> str:
    """Package if declared, else a non-empty namespace option, else ""."""
    if descriptor.package:
        return descriptor.package
    return descriptor.namespace_option or ""


def first_type_name(descriptor: ParsedDescriptor) -> str:
    """First top-level type in declaration order, or "" if none."""
    if descriptor.top_level_type_names:
        return descriptor.top_level_type_names[0]
    return ""


def build_type_name(descriptor: ParsedDescriptor) -> str:
    """Join namespace and type name with a dot, even when either is empty."""
    return f"{select_namespace(descriptor)}.{first_type_name(descriptor)}"


class TypeNameResolver:
    """Resolves schema ids to fully-qualified type names.

    Every call fetches and parses the schema again; wrap the resolver in
    CachedTypeNameResolver to avoid repeated registry round trips.

    Args:
        client: Registry used to fetch schemas by id.
        parsers: Parser table keyed by format, the default table when omitted.
        subject_hint: Discriminator passed to every fetch.
        logger: Optional structlog logger.
    """

    def __init__(
        self,
        client: RegistryClient,
        parsers: Optional[Mapping[SchemaFormat, DescriptorParser]] = None,
        subject_hint: str = DEFAULT_SUBJECT_HINT,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._client = client
        self._parsers = parsers
        self._subject_hint = subject_hint
        self._logger = logger or structlog.get_logger()

    def resolve(self, schema_id: int) -> str:
        """Resolve the type name for a schema id.

        Raises:
            ValueError: If schema_id is negative.
            SchemaNotFoundError: The registry has no such schema.
            RegistryUnavailableError: The registry could not be reached.
            UnsupportedFormatError: No parser handles the schema's format.
            DescriptorParseError: The schema does not decode.
        """
        if schema_id < 0:
            raise ValueError(f"schema id must be non-negative, got {schema_id}")

        raw = self._client.fetch_schema(schema_id, self._subject_hint)
        parser = parser_for(raw.format, self._parsers)
        try:
            descriptor = parser.parse(raw)
        except DescriptorParseError as e:
            self._logger.warning(
                "descriptor_parse_failed",
                schema_id=schema_id,
                format=raw.format.value,
                error=str(e),
            )
            raise

        type_name = build_type_name(descriptor)
        if type_name.startswith(".") or type_name.endswith("."):
            self._logger.warning(
                "degenerate_type_name", schema_id=schema_id, type_name=type_name
            )
        self._logger.debug(
            "type_name_resolved",
            schema_id=schema_id,
            format=raw.format.value,
            type_name=type_name,
        )
        return type_name


class CachedTypeNameResolver:
    """Read-through cache of resolved type names keyed by schema id.

    Only successful resolutions are stored. The wrapped resolver runs
    outside the lock, so two threads missing on the same id both fetch;
    the later write wins with an identical value.

    Without maxsize the cache grows with every distinct id and entries
    leave only through invalidate() or clear(). With maxsize, the oldest
    stored entry is evicted once the limit is reached.

    Raises:
        ValueError: If maxsize is given and not positive.
    """

    def __init__(
        self,
        resolver: TypeNameResolver,
        logger: FilteringBoundLogger | None = None,
        maxsize: Optional[int] = None,
    ) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._resolver = resolver
        self._cache: dict[int, str] = {}
        self._maxsize = maxsize
        self._lock = threading.Lock()
        self._logger = logger or structlog.get_logger()

    def resolve(self, schema_id: int) -> str:
        with self._lock:
            cached = self._cache.get(schema_id)
        if cached is not None:
            self._logger.debug("type_name_cache_hit", schema_id=schema_id)
            return cached

        type_name = self._resolver.resolve(schema_id)
        with self._lock:
            self._cache.pop(schema_id, None)
            if self._maxsize is not None and len(self._cache) >= self._maxsize:
                # dicts keep insertion order
                del self._cache[next(iter(self._cache))]
            self._cache[schema_id] = type_name
        return type_name

    def invalidate(self, schema_id: int) -> None:
        """Drop the cached name for one schema id."""
        with self._lock:
            self._cache.pop(schema_id, None)

    def clear(self) -> None:
        """Drop every cached name."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
