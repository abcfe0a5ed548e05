"""
Record store interface shared by the Firestore DAO and the in-memory store.

The ledger never talks to a database client directly: every read, write,
atomic batch and live subscription goes through a RecordStore.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Union

Snapshot = List[Dict[str, Any]]
SnapshotCallback = Callable[[Snapshot], None]


@dataclass
class WriteOp:
    """One document mutation inside an atomic batch."""
    kind: str  # "set", "update" or "delete"
    collection: str
    document_id: str
    data: Optional[Dict[str, Any]] = None
    merge: bool = False

    @classmethod
    def set(cls, collection: str, document_id: str, data: Any, merge: bool = False) -> "WriteOp":
        return cls("set", collection, document_id, to_document(data), merge)

    @classmethod
    def update(cls, collection: str, document_id: str, data: Dict[str, Any]) -> "WriteOp":
        return cls("update", collection, document_id, to_document(data))

    @classmethod
    def delete(cls, collection: str, document_id: str) -> "WriteOp":
        return cls("delete", collection, document_id)


def _convert_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        # Calendar days are stored as ISO strings so equality filters work
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_convert_value(v) for v in value]
    return value


def to_document(obj: Union[Dict[str, Any], Any]) -> Dict[str, Any]:
    """Convert a dataclass object or dict to a store-compatible dictionary."""
    if is_dataclass(obj) and not isinstance(obj, type):
        data_dict = asdict(obj)
    elif isinstance(obj, dict):
        data_dict = dict(obj)
    else:
        raise TypeError(f"Object of type {type(obj)} is not supported for Firestore conversion")
    return {key: _convert_value(value) for key, value in data_dict.items()}


class RecordStore(ABC):
    """Document store with atomic batches and live collection snapshots."""

    @abstractmethod
    async def add_document(self, collection: str, document_id: str, data: Union[Dict[str, Any], Any],
                           merge: bool = False) -> str:
        """Create (or overwrite, or merge into) a document with a specific ID."""

    @abstractmethod
    async def update_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """Patch an existing document."""

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document, or None when it does not exist."""

    @abstractmethod
    async def query_documents(self, collection: str, filters: List[tuple] = None,
                              order_by: str = None, limit: int = None, desc: bool = False) -> List[Dict[str, Any]]:
        """Query documents with (field, operator, value) filters."""

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document; deleting a missing document is not an error."""

    @abstractmethod
    def new_document_id(self, collection: str) -> str:
        """Reserve a fresh document id in a collection."""

    @abstractmethod
    async def commit_batch(self, ops: List[WriteOp]) -> None:
        """Apply every op or none of them."""

    @abstractmethod
    async def commit_with_counter(self, counter_collection: str, counter_id: str, floor: int,
                                  build_ops: Callable[[int], List[WriteOp]]) -> int:
        """
        Claim the next value of a counter document and commit ops built from it.

        The claimed value is max(stored value, floor) + 1. The counter update
        and the ops commit together or not at all.
        """

    @abstractmethod
    def subscribe(self, collection: str, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Push the full collection to callback now and after every change.

        Returns a function that cancels the subscription.
        """
