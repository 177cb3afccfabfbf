import logging
import uuid
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def log_action(
    db: Session,
    actor_id: uuid.UUID,
    action: str,
    resource_type: str,
    resource_id: Any = None,
    details: Optional[dict] = None,
) -> Optional[AuditLog]:
    """Record an audit entry. Never fails the caller: errors are logged and dropped."""
    entry = AuditLog(
        actor_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=_jsonable(details or {}),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Audit write failed: %s %s %s", action, resource_type, resource_id)
        return None
    return entry
