from sqlalchemy import Column, String, Text, Integer, ForeignKey, DateTime, Numeric, Enum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from lostfound.models.base import BaseModel, utcnow
from lostfound.models.enums import PostType, PostCategory, PostStatus

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class Post(BaseModel):
    __tablename__ = "posts"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Enum(PostType, name="post_type", values_callable=_enum_values), nullable=False)
    category = Column(Enum(PostCategory, name="category", values_callable=_enum_values), nullable=False)
    location_text = Column(Text)
    latitude = Column(Numeric(10, 8, asdecimal=False))
    longitude = Column(Numeric(11, 8, asdecimal=False))
    contact_info = Column(Text, nullable=False)
    status = Column(
        Enum(PostStatus, name="post_status", values_callable=_enum_values),
        default=PostStatus.ACTIVE,
        nullable=False,
    )
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="posts")
    images = relationship(
        "PostImage",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by=lambda: [PostImage.order_index, PostImage.id],
    )
    conversations = relationship("Conversation", back_populates="post")

    __table_args__ = (
        # Coordinates come in pairs
        CheckConstraint(
            '(latitude IS NULL AND longitude IS NULL) OR (latitude IS NOT NULL AND longitude IS NOT NULL)',
            name='check_post_coordinates'
        ),
        Index('ix_posts_user_id', 'user_id'),
        Index('ix_posts_created_at', 'created_at'),
        Index('ix_posts_status_type_category', 'status', 'type', 'category'),
        Index('ix_posts_coordinates', 'latitude', 'longitude'),
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

class PostImage(BaseModel):
    __tablename__ = "post_images"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    image_url = Column(String(2048), nullable=False)
    alt_text = Column(Text)
    order_index = Column(Integer, default=0, nullable=False)

    post = relationship("Post", back_populates="images")

    __table_args__ = (
        Index('ix_post_images_post_id_order', 'post_id', 'order_index'),
    )
