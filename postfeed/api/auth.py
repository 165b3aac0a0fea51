"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from postfeed.database import get_db
from postfeed.rate_limit import api_rate_limit
from postfeed.schemas.auth import AuthResponse, LoginRequest, SignupRequest, UserResponse
from postfeed.schemas.envelope import ApiResponse
from postfeed.services.auth import authenticate_user, create_access_token, register_user

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/signup",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
@api_rate_limit
def signup(
    request: Request,
    user_data: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and return a token for it."""
    user = register_user(db, user_data)
    access_token = create_access_token(user.id)

    return ApiResponse(
        message="User registered successfully",
        data=AuthResponse(token=access_token, user=UserResponse.model_validate(user)),
    )


@router.post("/login", response_model=ApiResponse[AuthResponse])
@api_rate_limit
def login(
    request: Request,
    credentials: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials)
    access_token = create_access_token(user.id)

    return ApiResponse(
        message="Login successful",
        data=AuthResponse(token=access_token, user=UserResponse.model_validate(user)),
    )
