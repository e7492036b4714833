"""SQLAlchemy ORM models for the ledger domain."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_ACTION_STATUS
from app.db.types import JSONDocument


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ledger(Base):
    """
    Collaborative checklist/workspace.

    Permissions:
    - Owner: everything, including update/delete and sharing
    - Collaborators: EDITOR or VIEWER via ledger_collaborators
    """

    __tablename__ = "ledgers"
    __table_args__ = (
        Index("idx_ledgers_owner_created", "owner_user_id", "created_at"),
        Index("idx_ledgers_linked_entity", "linked_entity_type", "linked_entity_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Free-form tag: "memorial", "fundraiser", "event", "underworld_activity"
    linked_entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    linked_entity_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships (deleting a ledger removes everything under it)
    actions: Mapped[list["LedgerAction"]] = relationship(
        back_populates="ledger",
        cascade="all, delete-orphan",
        order_by="LedgerAction.created_at.desc()",
    )
    collaborators: Mapped[list["LedgerCollaborator"]] = relationship(
        back_populates="ledger",
        cascade="all, delete-orphan",
        order_by="LedgerCollaborator.added_at.desc()",
    )
    status_updates: Mapped[list["LedgerStatusUpdate"]] = relationship(
        back_populates="ledger",
        cascade="all, delete-orphan",
    )


class LedgerAction(Base):
    """Work item within a ledger."""

    __tablename__ = "ledger_actions"
    __table_args__ = (
        Index("idx_ledger_actions_ledger_created", "ledger_id", "created_at"),
        Index("idx_ledger_actions_ledger_status", "ledger_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ledger_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("ledgers.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_ACTION_STATUS.value, nullable=False
    )
    creator_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_email: Mapped[str] = mapped_column(String(320), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    ledger: Mapped["Ledger"] = relationship(back_populates="actions")
    attachments: Mapped[list["LedgerAttachment"]] = relationship(
        back_populates="action",
        cascade="all, delete-orphan",
        order_by="LedgerAttachment.created_at.asc()",
    )
    # No delete cascade: audit rows outlive the action (action_id -> NULL)
    status_updates: Mapped[list["LedgerStatusUpdate"]] = relationship(
        back_populates="action",
    )


class LedgerAttachment(Base):
    """
    Typed, possibly-empty slot on an action.

    data IS NULL means the slot is expected but not filled yet.
    The type is fixed at creation; fills are validated against it.
    """

    __tablename__ = "ledger_attachments"
    __table_args__ = (
        UniqueConstraint("action_id", "slot_key", name="uq_ledger_attachments_action_slot"),
        Index("idx_ledger_attachments_action_created", "action_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    action_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("ledger_actions.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    slot_key: Mapped[str] = mapped_column(String(100), nullable=False)
    data: Mapped[dict | None] = mapped_column(JSONDocument, nullable=True)
    creator_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_email: Mapped[str] = mapped_column(String(320), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    action: Mapped["LedgerAction"] = relationship(back_populates="attachments")

    @property
    def is_empty(self) -> bool:
        return self.data is None


class LedgerCollaborator(Base):
    """Non-owner access grant (EDITOR or VIEWER)."""

    __tablename__ = "ledger_collaborators"
    __table_args__ = (
        UniqueConstraint("ledger_id", "user_id", name="uq_ledger_collaborators_ledger_user"),
        Index("idx_ledger_collaborators_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ledger_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("ledgers.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    added_by_user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    added_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    ledger: Mapped["Ledger"] = relationship(back_populates="collaborators")


class LedgerStatusUpdate(Base):
    """
    Append-only audit event.

    action_id is NULL for ledger-level events (and for events whose action
    was deleted). Rows are never updated or deleted by the services.
    """

    __tablename__ = "ledger_status_updates"
    __table_args__ = (
        Index("idx_ledger_status_updates_ledger_created", "ledger_id", "created_at"),
        Index("idx_ledger_status_updates_action_created", "action_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ledger_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("ledgers.id", ondelete="CASCADE"), nullable=False
    )
    action_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("ledger_actions.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    actor_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSONDocument, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    ledger: Mapped["Ledger"] = relationship(back_populates="status_updates")
    action: Mapped["LedgerAction | None"] = relationship(back_populates="status_updates")
