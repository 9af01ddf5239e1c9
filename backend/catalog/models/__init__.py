"""
Product Catalog Database Models

SQLAlchemy models for the relational store. These are persistence records,
separate from the ``Product`` domain entity.
"""

from datetime import datetime
import uuid

from sqlalchemy import (
    UUID,
    Text,
    Integer,
    DateTime,
    CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from ..constants import get_current_timestamp


class Base(DeclarativeBase):
    """Canonical Base class for all database models."""

    pass


class TimestampMixin:
    """Mixin for timestamp fields.

    Timestamps are assigned client-side so ordering by ``updated_at`` has
    microsecond resolution; the server default covers rows written by other
    tools.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=get_current_timestamp,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=get_current_timestamp,
        server_default=func.now(),
        nullable=False,
        index=True,
    )


class ProductRecord(Base, TimestampMixin):
    """Product row."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, name={self.name}, price={self.price})>"


__all__ = ["Base", "TimestampMixin", "ProductRecord"]
