import logging
import math
import uuid
from datetime import date, datetime, time
from typing import Any, Callable, Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.core.errors import DataAccessError, NotFoundError
from clinic_backend.models.document import Document
from clinic_backend.store.base import DocumentStore, Filter, matches_filters, sort_key, validate_filters

logger = logging.getLogger(__name__)

TIMESTAMP_KEYS = {'_seconds', '_nanoseconds'}


def encode_value(value: Any) -> Any:
    """Make ``value`` JSON-safe; datetimes become ``{"_seconds", "_nanoseconds"}`` maps."""
    if isinstance(value, datetime):
        return {'_seconds': math.floor(value.timestamp()), '_nanoseconds': value.microsecond * 1000}
    if isinstance(value, date):
        return encode_value(datetime.combine(value, time.min))
    if isinstance(value, dict):
        return {key: encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == TIMESTAMP_KEYS and isinstance(value['_seconds'], int):
            return datetime.fromtimestamp(value['_seconds']).replace(
                microsecond=int(value['_nanoseconds'] or 0) // 1000,
            )
        return {key: decode_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    return value


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class SqlDocumentStore(DocumentStore):
    """Documents kept as JSON rows of one SQLAlchemy table.

    Filtering and ordering happen in Python over the whole collection, so no
    per-field indexes are needed.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _run(self, action: str, work: Callable[[Session], Any], commit: bool = False) -> Any:
        db = self._session_factory()
        try:
            result = work(db)
            if commit:
                db.commit()
            return result
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception('Document store failed to %s', action)
            raise DataAccessError(f'Database unavailable while trying to {action}') from exc
        finally:
            db.close()

    @staticmethod
    def _to_dict(row: Document) -> dict:
        document = decode_value(dict(row.data or {}))
        document['id'] = row.doc_id
        return document

    @staticmethod
    def _payload(data: dict) -> dict:
        return encode_value({key: value for key, value in data.items() if key != 'id'})

    def create(self, collection: str, data: dict, doc_id: str | None = None) -> str:
        doc_id = doc_id or new_document_id()

        def work(db: Session) -> str:
            db.merge(Document(collection=collection, doc_id=doc_id, data=self._payload(data)))
            return doc_id

        return self._run(f'create {collection} document', work, commit=True)

    def get(self, collection: str, doc_id: str) -> dict | None:
        def work(db: Session) -> dict | None:
            row = db.get(Document, (collection, doc_id))
            return self._to_dict(row) if row else None

        return self._run(f'read {collection} document', work)

    def update(self, collection: str, doc_id: str, data: dict) -> None:
        def work(db: Session) -> None:
            row = db.get(Document, (collection, doc_id))
            if row is None:
                raise NotFoundError(f'No {collection} document with id {doc_id}')
            merged = dict(row.data or {})
            merged.update(self._payload(data))
            row.data = merged

        self._run(f'update {collection} document', work, commit=True)

    def delete(self, collection: str, doc_id: str) -> None:
        def work(db: Session) -> None:
            db.query(Document).filter(
                Document.collection == collection,
                Document.doc_id == doc_id,
            ).delete(synchronize_session=False)

        self._run(f'delete {collection} document', work, commit=True)

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        validate_filters(filters)

        def work(db: Session) -> list[dict]:
            rows = db.query(Document).filter(Document.collection == collection).all()
            return [self._to_dict(row) for row in rows]

        documents = [
            document
            for document in self._run(f'query {collection}', work)
            if matches_filters(document, filters)
        ]
        if order_by:
            documents.sort(key=lambda document: sort_key(document.get(order_by)), reverse=descending)
        return documents

    def delete_many(self, collection: str, doc_ids: Iterable[str]) -> None:
        ids = list(doc_ids)
        if not ids:
            return

        def work(db: Session) -> None:
            db.query(Document).filter(
                Document.collection == collection,
                Document.doc_id.in_(ids),
            ).delete(synchronize_session=False)

        self._run(f'batch delete {collection} documents', work, commit=True)
