from pydantic import BaseModel, ConfigDict

class UserSummary(BaseModel):
    """Minimal author/participant projection; never carries contact or credential fields"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
