# Overview: Record store; one repository per named document collection.

"""
Record Store

Every storefront record is a JSON document kept in a named collection
(``users``, ``businesses``, ``auditLogs``, ``systemSettings``, ``orders``,
``sessions``). Services receive a ``RecordStore`` and never reach for a
process-wide table, so tests run against ``RecordStore.in_memory()`` and the
app runs against ``RecordStore.sql()``.

CONTRACT:
- get() returns a copy of the document or None (absent is not an error)
- list() returns documents in insertion order; replacing keeps position
- put() is a whole-document replace or insert and bumps ``version``
- a document carrying a ``version`` that no longer matches the stored one
  is rejected with StaleRecordError (compare-and-swap)
- database failures surface as StoreUnavailableError and are never retried
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from .errors import StaleRecordError, StoreUnavailableError

VERSION_FIELD = "version"

USERS = "users"
BUSINESSES = "businesses"
AUDIT_LOGS = "auditLogs"
SYSTEM_SETTINGS = "systemSettings"
ORDERS = "orders"
SESSIONS = "sessions"

COLLECTION_NAMES = (USERS, BUSINESSES, AUDIT_LOGS, SYSTEM_SETTINGS, ORDERS, SESSIONS)


def _strip_version(document: dict) -> dict:
    body = copy.deepcopy(document)
    body.pop(VERSION_FIELD, None)
    return body


def _with_version(data: dict, version: int) -> dict:
    doc = copy.deepcopy(data)
    doc[VERSION_FIELD] = version
    return doc


class Collection(ABC):
    """Keyed access to the documents of one named collection."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get(self, key: str) -> dict | None:
        ...

    @abstractmethod
    def list(self) -> list[dict]:
        ...

    @abstractmethod
    def put(self, key: str, document: dict) -> dict:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        ...

    def count(self) -> int:
        return len(self.list())

    def find(self, predicate) -> dict | None:
        """First document (in collection order) matching predicate."""
        for doc in self.list():
            if predicate(doc):
                return doc
        return None

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryCollection(Collection):
    """In-process collection for tests and single-process demos."""

    def __init__(self, name: str):
        super().__init__(name)
        self._docs: dict[str, tuple[dict, int]] = {}

    def get(self, key: str) -> dict | None:
        entry = self._docs.get(key)
        if entry is None:
            return None
        data, version = entry
        return _with_version(data, version)

    def list(self) -> list[dict]:
        return [_with_version(data, version) for data, version in self._docs.values()]

    def put(self, key: str, document: dict) -> dict:
        expected = document.get(VERSION_FIELD)
        existing = self._docs.get(key)
        if existing is None:
            version = 1
        else:
            if expected is not None and expected != existing[1]:
                raise StaleRecordError()
            version = existing[1] + 1
        data = _strip_version(document)
        self._docs[key] = (data, version)
        return _with_version(data, version)

    def delete(self, key: str) -> bool:
        return self._docs.pop(key, None) is not None

    def count(self) -> int:
        return len(self._docs)

    def clear(self) -> None:
        self._docs.clear()


class SqlCollection(Collection):
    """
    Collection backed by rows of the ``documents`` table.

    WHY version_id_col: two requests that read the same row and both write
    it would otherwise silently lose one update. SQLAlchemy raises
    StaleDataError for the loser, reported as StaleRecordError.
    """

    def __init__(self, name: str, session=None):
        super().__init__(name)
        self._session = session

    @property
    def session(self):
        if self._session is not None:
            return self._session
        from .extensions import db
        return db.session

    def _query(self):
        from .models import Document
        return self.session.query(Document).filter(Document.collection == self.name)

    def _row(self, key: str):
        from .models import Document
        return self._query().filter(Document.key == key).first()

    def _unavailable(self, exc: Exception) -> StoreUnavailableError:
        self.session.rollback()
        return StoreUnavailableError(f"Record store unavailable: {exc}")

    def get(self, key: str) -> dict | None:
        try:
            row = self._row(key)
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc
        if row is None:
            return None
        return _with_version(row.data, row.version_id)

    def list(self) -> list[dict]:
        from .models import Document
        try:
            rows = self._query().order_by(Document.id.asc()).all()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc
        return [_with_version(row.data, row.version_id) for row in rows]

    def put(self, key: str, document: dict) -> dict:
        from .models import Document
        expected = document.get(VERSION_FIELD)
        data = _strip_version(document)
        try:
            row = self._row(key)
            if row is None:
                row = Document(collection=self.name, key=key, data=data)
                self.session.add(row)
            else:
                if expected is not None and expected != row.version_id:
                    raise StaleRecordError()
                row.data = data
                flag_modified(row, "data")
            self.session.commit()
            return _with_version(row.data, row.version_id)
        except StaleDataError as exc:
            self.session.rollback()
            raise StaleRecordError() from exc
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc

    def delete(self, key: str) -> bool:
        try:
            row = self._row(key)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
            return True
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc

    def count(self) -> int:
        try:
            return self._query().count()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc

    def clear(self) -> None:
        try:
            self._query().delete(synchronize_session=False)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc


class RecordStore:
    """The named collections every service is built on."""

    def __init__(self, collections: dict[str, Collection]):
        missing = [name for name in COLLECTION_NAMES if name not in collections]
        if missing:
            raise ValueError(f"Missing collections: {', '.join(missing)}")
        self._collections = dict(collections)
        self.users = collections[USERS]
        self.businesses = collections[BUSINESSES]
        self.audit_logs = collections[AUDIT_LOGS]
        self.system_settings = collections[SYSTEM_SETTINGS]
        self.orders = collections[ORDERS]
        self.sessions = collections[SESSIONS]

    @classmethod
    def in_memory(cls) -> "RecordStore":
        return cls({name: MemoryCollection(name) for name in COLLECTION_NAMES})

    @classmethod
    def sql(cls, session=None) -> "RecordStore":
        return cls({name: SqlCollection(name, session=session) for name in COLLECTION_NAMES})

    def collection(self, name: str) -> Collection:
        return self._collections[name]
