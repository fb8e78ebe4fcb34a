from pydantic import BaseModel, Field, field_validator
from typing import Optional
from lostfound.models.enums import PostType, PostCategory

class SearchFilters(BaseModel):
    """Independently combinable post search filters.

    The geo filter applies only when latitude, longitude and radius_km are
    all present; supplying some but not all of them is rejected when the
    search plan is built.
    """
    query: Optional[str] = None
    type: Optional[PostType] = None
    category: Optional[PostCategory] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius_km: Optional[float] = Field(None, gt=0)
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)

    @field_validator("query", "location", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def geo_fields(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius_km": self.radius_km,
        }
