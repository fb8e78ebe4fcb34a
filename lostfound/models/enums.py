from enum import Enum

class PostType(str, Enum):
    LOST = "lost"
    FOUND = "found"

class PostCategory(str, Enum):
    PERSON = "person"
    CAR = "car"
    FURNITURE = "furniture"
    ELECTRONICS = "electronics"
    DOCUMENTS = "documents"
    JEWELRY = "jewelry"
    CLOTHING = "clothing"
    OTHER = "other"

class PostStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    CLOSED = "closed"

class Language(str, Enum):
    AR = "ar"
    EN = "en"
