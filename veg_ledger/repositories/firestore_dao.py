"""
Firestore Data Access Object for handling all database operations.

This module provides the Firestore implementation of the record store used by
the ledger: single-document reads and writes, atomic multi-document batches,
the per-day bill counter transaction, and live collection snapshots.
"""

import os
import logging
from typing import Dict, Any, List, Optional, Callable, Union
from datetime import datetime

from google.cloud import firestore
from google.cloud.firestore_v1 import AsyncClient

from veg_ledger.config import COLLECTION_PREFIX
from veg_ledger.errors import RecordStoreError
from veg_ledger.repositories.base import RecordStore, WriteOp, SnapshotCallback, to_document

logger = logging.getLogger(__name__)


class FirestoreDAO(RecordStore):
    """Data Access Object for Firestore operations."""

    def __init__(self, project_id: str = None, collection_prefix: str = None, database_id: str = None):
        """
        Initialize the Firestore DAO.

        Args:
            project_id: Optional Firestore project ID (defaults to env variable)
            collection_prefix: Optional prefix for collections (for testing)
            database_id: Optional Firestore database ID (defaults to env variable or '(default)')
        """
        self.project_id = project_id or os.environ.get("FIRESTORE_PROJECT_ID")
        if not self.project_id:
            raise ValueError("Firestore project ID not provided and FIRESTORE_PROJECT_ID env variable not set")

        self.database_id = database_id or os.environ.get("FIRESTORE_DATABASE_ID", "(default)")

        self.db = AsyncClient(project=self.project_id, database=self.database_id)
        self.collection_prefix = COLLECTION_PREFIX if collection_prefix is None else collection_prefix
        # Snapshot listeners are only available on the synchronous client
        self._watch_client = None
        logger.info(f"Initialized FirestoreDAO with project {self.project_id}, database {self.database_id}, prefix: '{self.collection_prefix}'")

    def _get_collection_name(self, name: str) -> str:
        """Get the full collection name with prefix."""
        return f"{self.collection_prefix}{name}"

    def _document_ref(self, collection: str, document_id: str):
        return self.db.collection(self._get_collection_name(collection)).document(document_id)

    @staticmethod
    def _with_id(doc) -> Dict[str, Any]:
        data = doc.to_dict() or {}
        data.setdefault("id", doc.id)
        return data

    async def add_document(self, collection: str, document_id: str, data: Union[Dict[str, Any], Any],
                           merge: bool = False) -> str:
        """
        Add a document to a collection with a specific ID.

        Args:
            collection: Collection name
            document_id: Document ID
            data: Document data (dict or dataclass)
            merge: Merge into an existing document instead of replacing it

        Returns:
            Document ID
        """
        data_dict = to_document(data)
        try:
            doc_ref = self._document_ref(collection, document_id)
            await doc_ref.set(data_dict, merge=merge)
            logger.info(f"Added document {document_id} to {collection}")
            return document_id

        except Exception as e:
            logger.error(f"Error adding document to {collection}: {str(e)}")
            raise RecordStoreError(f"{collection}/{document_id}", "create", data_dict, cause=e) from e

    async def update_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """
        Update an existing document.

        Args:
            collection: Collection name
            document_id: Document ID
            data: Updated fields
        """
        data_dict = to_document(data)
        try:
            doc_ref = self._document_ref(collection, document_id)

            # Add updated_at timestamp
            if 'updated_at' not in data_dict:
                data_dict['updated_at'] = datetime.utcnow()

            await doc_ref.update(data_dict)
            logger.info(f"Updated document {document_id} in {collection}")

        except Exception as e:
            logger.error(f"Error updating document {document_id} in {collection}: {str(e)}")
            raise RecordStoreError(f"{collection}/{document_id}", "update", data_dict, cause=e) from e

    async def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a document by ID.

        Args:
            collection: Collection name
            document_id: Document ID

        Returns:
            Document data or None if not found
        """
        try:
            doc = await self._document_ref(collection, document_id).get()

            if doc.exists:
                return self._with_id(doc)
            else:
                logger.warning(f"Document {document_id} not found in {collection}")
                return None

        except Exception as e:
            logger.error(f"Error getting document {document_id} from {collection}: {str(e)}")
            raise RecordStoreError(f"{collection}/{document_id}", "get", cause=e) from e

    async def query_documents(self, collection: str, filters: List[tuple] = None,
                              order_by: str = None, limit: int = None, desc: bool = False) -> List[Dict[str, Any]]:
        """
        Query documents with filters.

        Args:
            collection: Collection name
            filters: List of (field, operator, value) tuples
            order_by: Field to order by
            limit: Maximum number of results
            desc: Order descending

        Returns:
            List of document dictionaries
        """
        try:
            query = self.db.collection(self._get_collection_name(collection))

            if filters:
                for field, op, value in filters:
                    query = query.where(filter=firestore.FieldFilter(field, op, value))

            if order_by:
                if desc:
                    query = query.order_by(order_by, direction=firestore.Query.DESCENDING)
                else:
                    query = query.order_by(order_by)

            if limit:
                query = query.limit(limit)

            results = []
            async for doc in query.stream():
                results.append(self._with_id(doc))

            logger.info(f"Query returned {len(results)} results from {collection}")
            return results

        except Exception as e:
            logger.error(f"Error querying {collection}: {str(e)}")
            raise RecordStoreError(collection, "list", cause=e) from e

    async def delete_document(self, collection: str, document_id: str) -> None:
        """
        Delete a document by ID.

        Args:
            collection: Collection name
            document_id: Document ID
        """
        try:
            await self._document_ref(collection, document_id).delete()
            logger.info(f"Deleted document {document_id} from {collection}")

        except Exception as e:
            logger.error(f"Error deleting document {document_id} from {collection}: {str(e)}")
            raise RecordStoreError(f"{collection}/{document_id}", "delete", cause=e) from e

    def new_document_id(self, collection: str) -> str:
        """Let Firestore generate an id without writing anything."""
        return self.db.collection(self._get_collection_name(collection)).document().id

    def _apply_op(self, writer, op: WriteOp) -> None:
        """Stage one op on a write batch or a transaction."""
        ref = self._document_ref(op.collection, op.document_id)
        if op.kind == "set":
            writer.set(ref, op.data, merge=op.merge)
        elif op.kind == "update":
            writer.update(ref, op.data)
        elif op.kind == "delete":
            writer.delete(ref)
        else:
            raise ValueError(f"Unknown write op kind: {op.kind}")

    async def commit_batch(self, ops: List[WriteOp]) -> None:
        """
        Commit several writes atomically.

        Args:
            ops: Ordered writes; all of them commit or none do
        """
        if not ops:
            return
        try:
            batch = self.db.batch()
            for op in ops:
                self._apply_op(batch, op)
            await batch.commit()
            logger.info(f"Committed batch of {len(ops)} writes")

        except Exception as e:
            logger.error(f"Error committing batch of {len(ops)} writes: {str(e)}")
            raise RecordStoreError("batch-write", "write", cause=e) from e

    async def commit_with_counter(self, counter_collection: str, counter_id: str, floor: int,
                                  build_ops: Callable[[int], List[WriteOp]]) -> int:
        """
        Claim the next counter value and commit the ops built from it in one transaction.

        Args:
            counter_collection: Collection holding counter documents
            counter_id: Counter document ID
            floor: Lowest value already in use according to the caller
            build_ops: Builds the writes for the claimed value

        Returns:
            The claimed counter value
        """
        counter_ref = self._document_ref(counter_collection, counter_id)

        @firestore.async_transactional
        async def _claim(transaction):
            snapshot = await counter_ref.get(transaction=transaction)
            last = 0
            if snapshot.exists:
                last = int((snapshot.to_dict() or {}).get("last", 0))
            value = max(last, floor) + 1
            for op in build_ops(value):
                self._apply_op(transaction, op)
            transaction.set(counter_ref, {"last": value, "updated_at": datetime.utcnow()})
            return value

        try:
            value = await _claim(self.db.transaction())
            logger.info(f"Claimed {counter_collection}/{counter_id} = {value}")
            return value

        except Exception as e:
            logger.error(f"Error claiming counter {counter_id} in {counter_collection}: {str(e)}")
            raise RecordStoreError("batch-write", "write", cause=e) from e

    def subscribe(self, collection: str, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Listen to a collection; callback runs on Firestore's watch thread.

        Args:
            collection: Collection name
            callback: Receives the full list of documents after every change

        Returns:
            Function that stops the listener
        """
        if self._watch_client is None:
            self._watch_client = firestore.Client(project=self.project_id, database=self.database_id)

        def _on_snapshot(docs, changes, read_time):
            try:
                callback([self._with_id(doc) for doc in docs])
            except Exception as e:
                logger.error(f"Error handling snapshot for {collection}: {str(e)}")

        watch = self._watch_client.collection(self._get_collection_name(collection)).on_snapshot(_on_snapshot)
        logger.info(f"Subscribed to {collection}")
        return watch.unsubscribe
