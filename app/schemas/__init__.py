from app.schemas.user import (
    SignUpRequest,
    SignInRequest,
    UserResponse,
    SessionMetadata,
    SessionResponse,
    TokenResponse,
)
from app.schemas.generation import (
    GenerateImageResponse,
    ErrorResponse,
    CreateImageRequest,
    CreateImageResponse,
    GeneratedImageInfo,
)

__all__ = [
    "SignUpRequest",
    "SignInRequest",
    "UserResponse",
    "SessionMetadata",
    "SessionResponse",
    "TokenResponse",
    "GenerateImageResponse",
    "ErrorResponse",
    "CreateImageRequest",
    "CreateImageResponse",
    "GeneratedImageInfo",
]
