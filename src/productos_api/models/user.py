from sqlalchemy import String, DateTime, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from datetime import datetime

from productos_api.database.base import Base


class User(Base):
    """
    SQLAlchemy model for User.

    Represents an account allowed to mutate the catalogue. The email is the
    login identifier and is stored lower-cased.
    """
    __tablename__ = "usuarios"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Email address (must be unique and non-null)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )

    # bcrypt hash; the plain password is never stored
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    # Inactive accounts cannot log in
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        # Never include the password hash
        return f"<User(id={self.id!r}, email={self.email!r})>"
