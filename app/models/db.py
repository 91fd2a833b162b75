"""ORM models for users, companies, company field data, ICP profiles and campaigns."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    companies: Mapped[List["Company"]] = relationship(back_populates="user", passive_deletes=True)


class Company(TimestampMixin, Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))

    user: Mapped[User] = relationship(back_populates="companies")
    data: Mapped[List["CompanyData"]] = relationship(
        back_populates="company", cascade="all, delete-orphan", passive_deletes=True
    )
    icp_profiles: Mapped[List["ICPProfile"]] = relationship(
        back_populates="company", cascade="all, delete-orphan", passive_deletes=True
    )


class CompanyData(TimestampMixin, Base):
    __tablename__ = "company_data"
    __table_args__ = (UniqueConstraint("company_id", "field_name", name="uq_company_data_company_field"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)
    field_name: Mapped[str] = mapped_column(String(100))
    field_value: Mapped[str] = mapped_column(Text, default="")
    version: Mapped[int] = mapped_column(Integer, default=1)

    company: Mapped[Company] = relationship(back_populates="data")


class UserActiveCompany(TimestampMixin, Base):
    __tablename__ = "user_active_company"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"))


class ICPProfile(TimestampMixin, Base):
    __tablename__ = "icp_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    company_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_data: Mapped[Dict[str, Any]] = mapped_column(JSONType, default=dict)
    confidence_level: Mapped[str] = mapped_column(String(20), default="medium")

    company: Mapped[Optional[Company]] = relationship(back_populates="icp_profiles")
    campaigns: Mapped[List["Campaign"]] = relationship(
        back_populates="icp", cascade="all, delete-orphan", passive_deletes=True
    )


class Campaign(TimestampMixin, Base):
    __tablename__ = "campaigns"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255))
    icp_id: Mapped[str] = mapped_column(ForeignKey("icp_profiles.id", ondelete="CASCADE"), index=True)
    copy_style: Mapped[str] = mapped_column(String(50))
    media_type: Mapped[str] = mapped_column(String(50))
    ad_copy: Mapped[str] = mapped_column(Text, default="")
    image_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cta: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hooks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    landing_page_copy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    icp: Mapped[ICPProfile] = relationship(back_populates="campaigns")
