"""Domain errors raised by the search and messaging services."""

from typing import Iterable, Optional

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
    _HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:
    _HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class LostFoundError(Exception):
    """Base class for errors the API layer maps onto HTTP responses."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "lost_found_error"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class NotFoundError(LostFoundError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "not_found"


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: int) -> None:
        self.post_id = post_id
        super().__init__(f"Post with id {post_id} not found")


class ConversationNotFoundError(NotFoundError):
    def __init__(self, conversation_id: int) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation with id {conversation_id} not found")


class UserNotFoundError(NotFoundError):
    """Carries every missing id so callers can report all of them at once."""

    def __init__(self, missing_ids: Iterable[int]) -> None:
        self.missing_ids = sorted(set(missing_ids))
        ids = ", ".join(str(user_id) for user_id in self.missing_ids)
        super().__init__(f"Users with ids {ids} not found")


class AccessDeniedError(LostFoundError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Access denied: user is not part of this conversation"


class ValidationError(LostFoundError):
    """Validation failures not covered by request schema validation."""

    status_code = _HTTP_422
    detail = "validation_error"


class ConflictError(LostFoundError):
    status_code = status.HTTP_409_CONFLICT
    detail = "conflict"
