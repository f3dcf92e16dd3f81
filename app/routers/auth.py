import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models import User
from app.schemas import (
    SignUpRequest,
    SignInRequest,
    UserResponse,
    SessionMetadata,
    SessionResponse,
    TokenResponse,
)
from app.services.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    request: SignUpRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a new account with email and password."""
    result = await db.execute(select(User).where(User.email == request.email))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already registered",
        )

    user = User(
        email=request.email,
        hashed_password=get_password_hash(request.password),
        full_name=request.full_name,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def sign_in(
    request: SignInRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange email and password for a bearer token."""
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(request.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid login credentials",
        )

    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/logout")
async def sign_out(current_user: User = Depends(get_current_user)):
    """
    Sign out.

    Tokens are stateless, so the client is responsible for discarding its
    token. This endpoint only confirms that the token was still valid.
    """
    logger.info("User %s signed out", current_user.id)
    return {"message": "Successfully signed out"}


@router.get("/session", response_model=SessionResponse)
async def get_session(current_user: User = Depends(get_current_user)):
    """Look up the identity behind the current token."""
    return SessionResponse(
        id=current_user.id,
        email=current_user.email,
        metadata=SessionMetadata(**current_user.get_metadata()),
    )
