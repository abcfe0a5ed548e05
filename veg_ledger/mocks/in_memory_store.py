"""In-memory record store for development and testing."""

import asyncio
import copy
import logging
import operator
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import uuid4

from veg_ledger.errors import RecordStoreError
from veg_ledger.repositories.base import RecordStore, SnapshotCallback, WriteOp, to_document

logger = logging.getLogger(__name__)

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
}


class InMemoryRecordStore(RecordStore):
    """
    A record store that keeps documents in dictionaries.

    Batches are validated against a copy of the data and swapped in only when
    every op succeeds, so a failed batch leaves nothing behind. Subscribers are
    called synchronously after each committed change.
    """

    def __init__(self, fail_writes: bool = False):
        """
        Initialize an empty store.

        Args:
            fail_writes: If True every write raises RecordStoreError (simulated outage)
        """
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self.fail_writes = fail_writes
        self._subscribers: Dict[str, List[SnapshotCallback]] = defaultdict(list)
        self._counter_lock = asyncio.Lock()
        self.commit_count = 0

    def _snapshot(self, collection: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self.collections[collection].values()]

    def _notify(self, collections) -> None:
        for name in collections:
            for callback in list(self._subscribers.get(name, [])):
                callback(self._snapshot(name))

    def _check_writable(self, path: str, operation: str) -> None:
        if self.fail_writes:
            logger.error(f"Simulated outage rejected {operation} on {path}")
            raise RecordStoreError(path, operation)

    @staticmethod
    def _apply_op(data: Dict[str, Dict[str, Dict[str, Any]]], op: WriteOp) -> None:
        docs = data.setdefault(op.collection, {})
        if op.kind == "set":
            if op.merge and op.document_id in docs:
                docs[op.document_id].update(copy.deepcopy(op.data))
            else:
                docs[op.document_id] = copy.deepcopy(op.data)
        elif op.kind == "update":
            if op.document_id not in docs:
                raise RecordStoreError(f"{op.collection}/{op.document_id}", "update")
            docs[op.document_id].update(copy.deepcopy(op.data))
        elif op.kind == "delete":
            docs.pop(op.document_id, None)
        else:
            raise ValueError(f"Unknown write op kind: {op.kind}")

    def _commit(self, ops: List[WriteOp]) -> None:
        staged = copy.deepcopy(dict(self.collections))
        for op in ops:
            self._apply_op(staged, op)
        self.collections = defaultdict(dict, staged)
        self.commit_count += 1
        self._notify({op.collection for op in ops})

    async def add_document(self, collection: str, document_id: str, data: Union[Dict[str, Any], Any],
                           merge: bool = False) -> str:
        self._check_writable(f"{collection}/{document_id}", "create")
        self._commit([WriteOp.set(collection, document_id, data, merge=merge)])
        logger.info(f"Added document {document_id} to {collection}")
        return document_id

    async def update_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        self._check_writable(f"{collection}/{document_id}", "update")
        self._commit([WriteOp.update(collection, document_id, data)])
        logger.info(f"Updated document {document_id} in {collection}")

    async def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collections[collection].get(document_id)
        if doc is None:
            logger.warning(f"Document {document_id} not found in {collection}")
            return None
        return copy.deepcopy(doc)

    async def query_documents(self, collection: str, filters: List[tuple] = None,
                              order_by: str = None, limit: int = None, desc: bool = False) -> List[Dict[str, Any]]:
        results = self._snapshot(collection)
        for field, op, value in filters or []:
            compare = _OPERATORS[op]
            results = [doc for doc in results if field in doc and compare(doc[field], value)]
        if order_by:
            results = [doc for doc in results if doc.get(order_by) is not None]
            results.sort(key=lambda doc: doc[order_by], reverse=desc)
        if limit:
            results = results[:limit]
        return results

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._check_writable(f"{collection}/{document_id}", "delete")
        self._commit([WriteOp.delete(collection, document_id)])
        logger.info(f"Deleted document {document_id} from {collection}")

    def new_document_id(self, collection: str) -> str:
        return uuid4().hex[:20]

    async def commit_batch(self, ops: List[WriteOp]) -> None:
        if not ops:
            return
        self._check_writable("batch-write", "write")
        self._commit(ops)
        logger.info(f"Committed batch of {len(ops)} writes")

    async def commit_with_counter(self, counter_collection: str, counter_id: str, floor: int,
                                  build_ops: Callable[[int], List[WriteOp]]) -> int:
        async with self._counter_lock:
            self._check_writable("batch-write", "write")
            counter = self.collections[counter_collection].get(counter_id) or {}
            value = max(int(counter.get("last", 0)), floor) + 1
            ops = list(build_ops(value))
            ops.append(WriteOp.set(counter_collection, counter_id, {"last": value}))
            self._commit(ops)
            logger.info(f"Claimed {counter_collection}/{counter_id} = {value}")
            return value

    def subscribe(self, collection: str, callback: SnapshotCallback) -> Callable[[], None]:
        self._subscribers[collection].append(callback)
        callback(self._snapshot(collection))

        def _unsubscribe() -> None:
            if callback in self._subscribers[collection]:
                self._subscribers[collection].remove(callback)

        return _unsubscribe

    def seed(self, collection: str, documents: List[Any]) -> None:
        """Load documents directly, bypassing batches (test fixtures, demo data)."""
        for document in documents:
            data = to_document(document)
            self.collections[collection][data["id"]] = data
        self._notify([collection])
