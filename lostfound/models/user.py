from sqlalchemy import Column, String, Boolean, DateTime, Enum, Index
from sqlalchemy.orm import relationship
from lostfound.models.base import BaseModel, utcnow
from lostfound.models.enums import Language

class User(BaseModel):
    """Identity record owned by the auth service; credentials live there, not here."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50))
    preferred_language = Column(
        Enum(Language, name="language", values_callable=lambda e: [m.value for m in e]),
        default=Language.EN,
        nullable=False,
    )
    is_verified = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    posts = relationship("Post", back_populates="user")

    __table_args__ = (
        Index('ix_users_created_at', 'created_at'),
    )
