from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime
from lostfound.models.enums import PostType, PostCategory, PostStatus
from lostfound.schemas.user_schema import UserSummary

class PostImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1)
    alt_text: Optional[str] = None

class PostBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: PostType
    category: PostCategory
    location_text: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    contact_info: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def coordinates_come_in_pairs(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

class PostCreate(PostBase):
    images: List[PostImageCreate] = []

class PostImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    image_url: str
    alt_text: Optional[str] = None
    order_index: int
    created_at: datetime

class PostInDB(PostBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: PostStatus
    created_at: datetime
    updated_at: datetime

class PostResult(PostInDB):
    """A post hydrated with its images and a minimal author projection"""
    images: List[PostImageResponse] = []
    user: UserSummary
    distance_km: Optional[float] = None
