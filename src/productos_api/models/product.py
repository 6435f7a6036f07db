from decimal import Decimal
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from productos_api.database.base import Base


class Product(Base):
    """
    SQLAlchemy model for a catalogue product.

    The CHECK constraints mirror the service-level validation rules so a row
    that bypassed the service still cannot hold a non-positive price or a
    negative quantity.
    """
    __tablename__ = "productos"
    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Money: fixed-point, never float
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2, asdecimal=True), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # Optimistic concurrency token; SQLAlchemy bumps it on every UPDATE and adds
    # "WHERE version = <loaded version>" so a concurrent write is detected.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # eager_defaults: server-generated timestamps are fetched at flush, so nothing
    # lazy-loads them later outside the session's async context.
    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self) -> str:
        return f"<Product(id={self.id!r}, name={self.name!r}, price={self.price!r})>"
