"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (synced from the identity provider)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('creator', 'admin')", name="ck_profiles_role"),
        nullable=False,
        default="creator",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    total_submissions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    approved_submissions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    membership: Mapped[Optional["MembershipModel"]] = relationship(
        "MembershipModel",
        back_populates="user",
        foreign_keys="MembershipModel.user_id",
        uselist=False,
    )


class AgencyModel(Base):
    """Agency (corporation) model."""

    __tablename__ = "agencies"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    industry: Mapped[str | None] = mapped_column(String(100))
    social_media: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    settings: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    allow_public_join: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    owner_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active_invites: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    owner: Mapped["ProfileModel"] = relationship("ProfileModel", foreign_keys=[owner_id])
    memberships: Mapped[list["MembershipModel"]] = relationship(
        "MembershipModel",
        back_populates="agency",
        cascade="all, delete-orphan",
    )
    invites: Mapped[list["InviteModel"]] = relationship(
        "InviteModel",
        back_populates="agency",
        cascade="all, delete-orphan",
    )


class MembershipModel(Base):
    """Agency membership model. ``user_id`` is unique: one agency per user."""

    __tablename__ = "memberships"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    agency_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("agencies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('owner', 'admin', 'creator')", name="ck_memberships_role"),
        nullable=False,
        default="creator",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("status IN ('pending', 'active')", name="ck_memberships_status"),
        nullable=False,
        default="active",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    invited_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
    )

    # Relationships
    agency: Mapped["AgencyModel"] = relationship("AgencyModel", back_populates="memberships")
    user: Mapped["ProfileModel"] = relationship(
        "ProfileModel",
        back_populates="membership",
        foreign_keys=[user_id],
    )
    inviter: Mapped[Optional["ProfileModel"]] = relationship(
        "ProfileModel",
        foreign_keys=[invited_by],
    )


class InviteModel(Base):
    """Agency invite code model."""

    __tablename__ = "invites"
    __table_args__ = (Index("ix_invites_code_active", "invite_code", "is_active"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    agency_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("agencies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    invite_code: Mapped[str] = mapped_column(String(16), nullable=False)
    invite_link: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("role IN ('creator', 'admin')", name="ck_invites_role"),
        nullable=False,
        default="creator",
    )
    max_uses: Mapped[int | None] = mapped_column(Integer)
    current_uses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    note: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Relationships
    agency: Mapped["AgencyModel"] = relationship("AgencyModel", back_populates="invites")
    creator: Mapped["ProfileModel"] = relationship("ProfileModel")


class SubmissionModel(Base):
    """Video submission model."""

    __tablename__ = "submissions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    creator_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    creator_username: Mapped[str] = mapped_column(String(100), nullable=False)
    video_url: Mapped[str] = mapped_column(String(1000), nullable=False, unique=True)
    platform: Mapped[str] = mapped_column(String(30), nullable=False)
    caption: Mapped[str] = mapped_column(Text, default="", nullable=False)
    hashtags: Mapped[list[str]] = mapped_column(JSONType, default=list)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_submissions_status",
        ),
        nullable=False,
        default="pending",
        index=True,
    )
    admin_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
    )
    admin_feedback: Mapped[str | None] = mapped_column(Text)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    creator: Mapped["ProfileModel"] = relationship("ProfileModel", foreign_keys=[creator_id])
    reviewer: Mapped[Optional["ProfileModel"]] = relationship(
        "ProfileModel", foreign_keys=[admin_id]
    )
