from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from storefront.db import Base


class User(Base):
    """Local mirror of an identity-provider user, kept in sync by the webhook."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    clerk_id = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(320), nullable=True)
    name = Column(String(256), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
