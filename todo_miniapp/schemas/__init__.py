# Pydantic schemas package
from todo_miniapp.schemas.base import ApiResponse, ErrorResponse

__all__ = [
    "ApiResponse",
    "ErrorResponse",
]
