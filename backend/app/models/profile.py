import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from app.database import Base


# ---------------------------------------------------
# Enums
# ---------------------------------------------------

class Role(str, enum.Enum):
    employee = "employee"
    manager = "manager"
    admin = "admin"


ROLE_COLUMN = String(20)  # keep String to avoid enum migration issues


# ---------------------------------------------------
# AuthIdentity (login credentials, one per profile)
# ---------------------------------------------------

class AuthIdentity(Base):
    __tablename__ = "auth_identities"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


# ---------------------------------------------------
# Profile
# ---------------------------------------------------

class Profile(Base):
    __tablename__ = "profiles"

    # shares its primary key with the backing AuthIdentity
    id = Column(
        Uuid(as_uuid=True),
        ForeignKey("auth_identities.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    email = Column(String(255), nullable=False, index=True)
    full_name = Column(String(200), nullable=False, default="")
    role = Column(ROLE_COLUMN, nullable=False, default=Role.employee.value)

    # Optional self-referencing FK; must point at a manager
    manager_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
