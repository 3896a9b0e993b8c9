import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Sequence

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from clinic_backend.core.errors import DataAccessError, NotFoundError
from clinic_backend.store.base import DocumentStore, Filter, validate_filters

logger = logging.getLogger(__name__)

# Firestore caps a write batch at 500 operations.
MAX_BATCH_SIZE = 500


def to_firestore_value(value: Any) -> Any:
    """Attach the local timezone to naive datetimes; Firestore would read them as UTC."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.astimezone()
    if isinstance(value, dict):
        return {key: to_firestore_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_firestore_value(item) for item in value]
    return value


class FirestoreDocumentStore(DocumentStore):
    """Cloud Firestore backend. Filters and ordering are pushed down to the server."""

    def __init__(self, client: Any = None):
        if client is None:
            from clinic_backend.core.firebase import get_firebase_app
            client = firestore.client(app=get_firebase_app())
        self._client = client

    def _run(self, action: str, work: Callable[[], Any]) -> Any:
        try:
            return work()
        except google_exceptions.NotFound as exc:
            raise NotFoundError(f'Document not found while trying to {action}') from exc
        except google_exceptions.GoogleAPIError as exc:
            logger.exception('Firestore failed to %s', action)
            raise DataAccessError(f'Firestore unavailable while trying to {action}: {exc}') from exc

    def create(self, collection: str, data: dict, doc_id: str | None = None) -> str:
        payload = to_firestore_value({key: value for key, value in data.items() if key != 'id'})

        def work() -> str:
            collection_ref = self._client.collection(collection)
            ref = collection_ref.document(doc_id) if doc_id else collection_ref.document()
            ref.set(payload)
            return ref.id

        return self._run(f'create {collection} document', work)

    def get(self, collection: str, doc_id: str) -> dict | None:
        def work() -> dict | None:
            snapshot = self._client.collection(collection).document(doc_id).get()
            if not snapshot.exists:
                return None
            return {**snapshot.to_dict(), 'id': snapshot.id}

        return self._run(f'read {collection} document', work)

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        payload = to_firestore_value({key: value for key, value in data.items() if key != 'id'})
        self._run(
            f'update {collection} document',
            lambda: self._client.collection(collection).document(doc_id).update(payload),
        )

    def delete(self, collection: str, doc_id: str) -> None:
        self._run(
            f'delete {collection} document',
            lambda: self._client.collection(collection).document(doc_id).delete(),
        )

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        validate_filters(filters)

        def work() -> list[dict]:
            query = self._client.collection(collection)
            for field, op, value in filters:
                query = query.where(filter=FieldFilter(field, op, to_firestore_value(value)))
            if order_by:
                direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
                query = query.order_by(order_by, direction=direction)
            return [{**snapshot.to_dict(), 'id': snapshot.id} for snapshot in query.stream()]

        return self._run(f'query {collection}', work)

    def delete_many(self, collection: str, doc_ids: Iterable[str]) -> None:
        ids = list(doc_ids)
        if not ids:
            return
        if len(ids) > MAX_BATCH_SIZE:
            raise DataAccessError(f'Cannot delete more than {MAX_BATCH_SIZE} documents in one batch')

        def work() -> None:
            batch = self._client.batch()
            for doc_id in ids:
                batch.delete(self._client.collection(collection).document(doc_id))
            batch.commit()

        self._run(f'batch delete {collection} documents', work)
