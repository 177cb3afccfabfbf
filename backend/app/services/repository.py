"""
Repository over the relational store and the identity store.

This is the only place that talks to SQLAlchemy on behalf of the service
layer. It exposes the small capability set the services need (select, get,
insert, update, delete, create_identity, delete_identity) so the services can
be exercised against any database the engine points at.

Every write commits immediately. Store failures roll the session back and
surface as CollaboratorError, so a failed call leaves no partial mutation.
"""

import logging
import uuid
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import CollaboratorError, NotFoundError
from app.models.profile import AuthIdentity
from app.services.auth import hash_password

logger = logging.getLogger(__name__)


class SqlRepository:
    def __init__(self, db: Session):
        self.db = db

    # ── helpers ──

    def _fail(self, op: str, model, exc: Exception) -> CollaboratorError:
        self.db.rollback()
        logger.exception("%s on %s failed", op, getattr(model, "__tablename__", model))
        return CollaboratorError(f"{op} {getattr(model, '__tablename__', model)} failed: {exc.__class__.__name__}")

    @staticmethod
    def _order_clause(model, field: str):
        # "-date" sorts descending, "date" ascending
        if field.startswith("-"):
            return getattr(model, field[1:]).desc()
        return getattr(model, field).asc()

    # ── queries ──

    def select(
        self,
        model,
        filters: Optional[dict] = None,
        order_by: Iterable[str] = (),
    ) -> list:
        """Rows of ``model`` matching every filter (lists/sets/tuples mean IN)."""
        try:
            q = self.db.query(model)
            for column, value in (filters or {}).items():
                attr = getattr(model, column)
                if isinstance(value, (list, tuple, set, frozenset)):
                    q = q.filter(attr.in_(list(value)))
                else:
                    q = q.filter(attr == value)
            for field in order_by:
                q = q.order_by(self._order_clause(model, field))
            return q.all()
        except SQLAlchemyError as exc:
            raise self._fail("select", model, exc)

    def get(self, model, row_id: uuid.UUID):
        try:
            return self.db.get(model, row_id)
        except SQLAlchemyError as exc:
            raise self._fail("get", model, exc)

    # ── commands ──

    def insert(self, model, row: dict):
        obj = model(**row)
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            raise self._fail("insert", model, exc)
        return obj

    def update(self, model, row_id: uuid.UUID, fields: dict[str, Any]):
        obj = self.get(model, row_id)
        if obj is None:
            raise NotFoundError(f"{model.__name__} not found")
        try:
            for field, value in fields.items():
                setattr(obj, field, value)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            raise self._fail("update", model, exc)
        return obj

    def delete(self, model, row_id: uuid.UUID) -> None:
        obj = self.get(model, row_id)
        if obj is None:
            raise NotFoundError(f"{model.__name__} not found")
        try:
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", model, exc)

    # ── identity ──

    def create_identity(self, email: str, secret: str) -> uuid.UUID:
        identity = self.insert(
            AuthIdentity,
            {"email": email.strip().lower(), "password_hash": hash_password(secret)},
        )
        return identity.id

    def delete_identity(self, identity_id: uuid.UUID) -> None:
        self.delete(AuthIdentity, identity_id)
