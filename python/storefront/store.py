"""Record stores backing the order and user handlers.

A record store owns one table of records keyed by a single attribute.

Store Contract:
1. get(key) - the record stored under key, or None
2. put(record) - create or replace the record under its key
3. update(key, fields) - overlay fields onto the stored record and return
   the merged result; raises NotFoundError when nothing is stored
4. scan() - every record in the table

Implementations:
- DynamoRecordStore: a DynamoDB table through boto3
- MemoryRecordStore: a process-local dict, for tests and local runs

Example:
    >>> store = MemoryRecordStore("orderId")
    >>> store.put({"orderId": "o1", "status": "pending"})
    >>> store.update("o1", {"status": "shipped"})
    {'orderId': 'o1', 'status': 'shipped'}
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import CollaboratorError, ConfigurationError, NotFoundError
from .logging import log_debug

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class RecordStore(ABC):
    """Abstract base class for record stores.

    Attributes:
        key_name: Attribute holding each record's primary key.
    """

    def __init__(self, key_name: str) -> None:
        self.key_name = key_name

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this store (for logging/debugging)."""
        ...

    @abstractmethod
    def get(self, key: Any) -> dict[str, Any] | None:
        """Return the record stored under ``key``, or None."""
        ...

    @abstractmethod
    def put(self, record: dict[str, Any]) -> None:
        """Create or replace the record under its key."""
        ...

    @abstractmethod
    def update(self, key: Any, fields: dict[str, Any]) -> dict[str, Any]:
        """Merge ``fields`` over the stored record and return the result.

        Raises:
            NotFoundError: If no record is stored under ``key``.
        """
        ...

    @abstractmethod
    def scan(self) -> list[dict[str, Any]]:
        """Return every record in the table."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, key_name={self.key_name!r})"


class MemoryRecordStore(RecordStore):
    """Record store kept in a process-local dict.

    Records are deep-copied on the way in and out so callers never share
    state with the store. A lock makes each operation atomic per store.
    """

    def __init__(self, key_name: str, name: str = "memory") -> None:
        super().__init__(key_name)
        self._name = name
        self._records: dict[Any, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: Any) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(key)
            return copy.deepcopy(record) if record is not None else None

    def put(self, record: dict[str, Any]) -> None:
        with self._lock:
            self._records[record[self.key_name]] = copy.deepcopy(record)

    def update(self, key: Any, fields: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            if key not in self._records:
                raise NotFoundError(
                    f"No record under {self.key_name}={key!r}",
                    metadata={"store": self._name, self.key_name: key},
                )
            merged = {**self._records[key], **copy.deepcopy(fields)}
            merged[self.key_name] = key
            self._records[key] = merged
            return copy.deepcopy(merged)

    def scan(self) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._records.values()]

    def __len__(self) -> int:
        return len(self._records)


class DynamoRecordStore(RecordStore):
    """Record store backed by a DynamoDB table.

    Floats are written as ``Decimal`` (boto3 refuses floats) and numbers
    read back are returned as ``int`` or ``float`` so records serialize
    to JSON unchanged.

    Updates are a single conditional ``UpdateItem``: the merge happens in
    DynamoDB, attribute by attribute, and fails with NotFoundError when
    the key does not exist.

    Example:
        >>> store = DynamoRecordStore.from_table_name("orders", "orderId")
        >>> store.get("o1")
    """

    def __init__(self, table: Any, key_name: str) -> None:
        super().__init__(key_name)
        self._table = table

    @classmethod
    def from_table_name(
        cls,
        table_name: str,
        key_name: str,
        *,
        region_name: str | None = None,
        resource: Any = None,
    ) -> DynamoRecordStore:
        """Build a store for ``table_name`` using a boto3 DynamoDB resource.

        Args:
            table_name: DynamoDB table name.
            key_name: Partition key attribute.
            region_name: AWS region (boto3 default chain when None).
            resource: Existing boto3 DynamoDB resource to reuse.

        Raises:
            ConfigurationError: If boto3 cannot build the resource, for
                example when no region is configured.
        """
        try:
            if resource is None:
                resource = boto3.resource("dynamodb", region_name=region_name)
            table = resource.Table(table_name)
        except (BotoCoreError, ClientError) as e:
            raise ConfigurationError(
                f"Cannot open DynamoDB table {table_name}",
                metadata={"cause_type": type(e).__name__, "cause": str(e)},
            ) from e
        return cls(table, key_name)

    @property
    def name(self) -> str:
        return str(getattr(self._table, "name", "dynamodb"))

    def get(self, key: Any) -> dict[str, Any] | None:
        response = self._call("get_item", Key={self.key_name: key})
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    def put(self, record: dict[str, Any]) -> None:
        self._call("put_item", Item=to_dynamo(record))

    def update(self, key: Any, fields: dict[str, Any]) -> dict[str, Any]:
        fields = {k: v for k, v in fields.items() if k != self.key_name}
        if not fields:
            record = self.get(key)
            if record is None:
                raise NotFoundError(
                    f"No record under {self.key_name}={key!r}",
                    metadata={"store": self.name, self.key_name: key},
                )
            return record

        names = {"#key": self.key_name}
        values: dict[str, Any] = {}
        assignments = []
        for index, (attribute, value) in enumerate(fields.items()):
            names[f"#f{index}"] = attribute
            values[f":v{index}"] = to_dynamo(value)
            assignments.append(f"#f{index} = :v{index}")

        try:
            response = self._call(
                "update_item",
                Key={self.key_name: key},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(#key)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except CollaboratorError as e:
            if _error_code(e.cause) == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(
                    f"No record under {self.key_name}={key!r}",
                    metadata={"store": self.name, self.key_name: key},
                ) from e
            raise
        return from_dynamo(response.get("Attributes", {}))

    def scan(self) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {}
        while True:
            response = self._call("scan", **kwargs)
            items.extend(from_dynamo(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            log_debug("Continuing scan", {"store": self.name, "scanned": len(items)})
            kwargs["ExclusiveStartKey"] = last_key

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return getattr(self._table, operation)(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise CollaboratorError(
                f"DynamoDB {operation} failed",
                cause=e,
                metadata={"store": self.name, "operation": operation},
            ) from e


def to_dynamo(value: Any) -> Any:
    """Convert a JSON-style value to one boto3 accepts (floats become Decimal)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert a value read from DynamoDB back to plain JSON types."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, set, tuple)):
        return [from_dynamo(v) for v in value]
    return value


def _error_code(error: BaseException | None) -> str | None:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


__all__ = [
    "RecordStore",
    "MemoryRecordStore",
    "DynamoRecordStore",
    "to_dynamo",
    "from_dynamo",
]
