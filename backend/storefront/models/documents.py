from __future__ import annotations

from ..extensions import db


class Document(db.Model):
    """
    One JSON document in a named collection (users, businesses, auditLogs, ...).

    WHY: The storefront persists whole records and replaces them wholesale.
    A single keyed document table keeps that contract while still giving
    durable storage and per-row optimistic locking.

    Position within a collection is the row id, so replacing a document
    keeps its place in listings.
    """
    __tablename__ = "documents"
    __table_args__ = (
        db.UniqueConstraint("collection", "key", name="uq_documents_collection_key"),
        db.Index("ix_documents_collection_id", "collection", "id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    collection = db.Column(db.String(64), nullable=False, index=True)
    key = db.Column(db.String(128), nullable=False)

    data = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}
