"""
Firestore document store used by every service.

A ``FirestoreStore`` wraps one Firestore client. It is created once at
application startup and handed to the services, so tests can swap in a fake
with the same async interface.
"""

from __future__ import annotations
import asyncio
import json
import logging
import os
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from kalima.config import Settings
from kalima.exceptions import ConflictError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

Document = Tuple[str, Dict[str, Any]]


class BatchWrite(NamedTuple):
    """One write inside an atomic batch.

    ``op`` is "create", "set", "delete" or "union". A "union" write appends
    ``data`` values to array fields of an existing document.
    """

    op: str
    collection: str
    doc_id: Optional[str]
    data: Optional[Dict[str, Any]] = None


def initialize_firebase(settings: Settings) -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once per process"""
    try:
        # Check if already initialized
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {}
    if settings.FIREBASE_PROJECT_ID:
        options["projectId"] = settings.FIREBASE_PROJECT_ID

    if settings.DEV_MODE and settings.FIREBASE_EMULATOR_HOST:
        # Use emulator for development
        os.environ["FIRESTORE_EMULATOR_HOST"] = settings.FIREBASE_EMULATOR_HOST
        logger.info(
            f"Firebase initialized with emulator: {settings.FIREBASE_EMULATOR_HOST}")
        return firebase_admin.initialize_app(options=options or None)

    if settings.FIREBASE_CREDENTIALS_JSON:
        try:
            cred = credentials.Certificate(
                json.loads(settings.FIREBASE_CREDENTIALS_JSON))
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
            raise
        logger.info(
            "Firebase initialized with credentials from FIREBASE_CREDENTIALS_JSON")
    else:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
        logger.info(
            f"Firebase initialized with credentials from {settings.FIREBASE_CREDENTIALS_PATH}")

    return firebase_admin.initialize_app(cred, options or None)


class FirestoreStore:
    """Async facade over the synchronous Firestore client"""

    def __init__(self, client):
        self.db = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirestoreStore":
        app = initialize_firebase(settings)
        return cls(firestore.client(app))

    async def _run(self, action: str, fn: Callable, *args, **kwargs):
        # the SDK is blocking; keep it off the event loop
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except google_exceptions.Conflict as e:
            raise ConflictError(f"Document already exists ({action})") from e
        except google_exceptions.NotFound as e:
            raise NotFoundError(f"Document not found ({action})") from e
        except Exception as e:
            logger.error(f"Firestore error while trying to {action}: {e}")
            raise StoreError(f"Error trying to {action}: {e}") from e

    # ============================================
    # READS
    # ============================================

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        def _get():
            doc = self.db.collection(collection).document(doc_id).get()
            return doc.to_dict() if doc.exists else None

        return await self._run(f"read {collection}/{doc_id}", _get)

    async def find_one(self, collection: str, field: str, value: Any) -> Optional[Document]:
        """First document where ``field == value``"""
        query = (
            self.db.collection(collection)
            .where(filter=firestore.FieldFilter(field, "==", value))
            .limit(1)
        )

        def _first():
            for doc in query.stream():
                return doc.id, doc.to_dict()
            return None

        return await self._run(f"query {collection} by {field}", _first)

    async def list(
        self,
        collection: str,
        filters: Optional[List[tuple]] = None,
    ) -> List[Document]:
        """
        Stream a collection, optionally filtered.

        Args:
            collection: The name of the Firestore collection.
            filters: A list of (field, op, value) tuples, or a dict of
                     {field: value} which defaults to '==' comparison.

        Returns:
            A list of (document_id, document_data) tuples.
        """
        query = self.db.collection(collection)
        if filters:
            if isinstance(filters, dict):
                filters = [(k, "==", v) for k, v in filters.items()]
            for f in filters:
                if len(f) != 3:
                    raise ValueError(
                        f"Invalid filter format: {f}. Expected (field, op, value)")
                query = query.where(filter=firestore.FieldFilter(*f))

        def _stream():
            return [(doc.id, doc.to_dict()) for doc in query.stream()]

        return await self._run(f"list {collection}", _stream)

    # ============================================
    # WRITES
    # ============================================

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Write a new document with a generated id and return the id"""
        def _add():
            _, ref = self.db.collection(collection).add(data)
            return ref.id

        return await self._run(f"add to {collection}", _add)

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Write a document that must not exist yet (raises ConflictError)"""
        ref = self.db.collection(collection).document(doc_id)
        await self._run(f"create {collection}/{doc_id}", ref.create, data)

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ref = self.db.collection(collection).document(doc_id)
        await self._run(f"write {collection}/{doc_id}", ref.set, data)

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Partial update of an existing document (raises NotFoundError)"""
        ref = self.db.collection(collection).document(doc_id)
        await self._run(f"update {collection}/{doc_id}", ref.update, data)

    async def delete(self, collection: str, doc_id: str) -> None:
        ref = self.db.collection(collection).document(doc_id)
        await self._run(f"delete {collection}/{doc_id}", ref.delete)

    async def array_union(self, collection: str, doc_id: str, field: str, values: List[Any]) -> None:
        """Add values to an array field, skipping ones already present"""
        await self.update(collection, doc_id, {field: firestore.ArrayUnion(values)})

    async def array_remove(self, collection: str, doc_id: str, field: str, values: List[Any]) -> None:
        await self.update(collection, doc_id, {field: firestore.ArrayRemove(values)})

    async def commit_batch(self, writes: List[BatchWrite]) -> List[str]:
        """Apply several writes atomically; returns the document ids in order"""
        batch = self.db.batch()
        ids = []
        for write in writes:
            coll = self.db.collection(write.collection)
            ref = coll.document(write.doc_id) if write.doc_id else coll.document()
            if write.op == "create":
                batch.create(ref, write.data)
            elif write.op == "set":
                batch.set(ref, write.data)
            elif write.op == "delete":
                batch.delete(ref)
            elif write.op == "union":
                batch.update(ref, {
                    field: firestore.ArrayUnion(values) for field, values in write.data.items()
                })
            else:
                raise ValueError(f"Unknown batch operation: {write.op}")
            ids.append(ref.id)

        await self._run("commit batch", batch.commit)
        return ids
