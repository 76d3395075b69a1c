"""
Registration and login endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from finance_tracker.api.dependencies import get_user_service
from finance_tracker.exceptions import (
    InvalidCredentials,
    InvalidUserData,
    UserAlreadyExists,
)
from finance_tracker.schemas.auth import (
    UserCredentials,
    UserResponse,
    RegisterResponse,
    LoginResponse,
)
from finance_tracker.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    request: UserCredentials,
    service: UserService = Depends(get_user_service),
):
    """Create a new user."""
    try:
        user = service.register(request)
    except UserAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidUserData as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    request: UserCredentials,
    service: UserService = Depends(get_user_service),
):
    """Exchange username and password for a bearer token."""
    try:
        user, token = service.login(request)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))
    return LoginResponse(user=UserResponse.model_validate(user), token=token)
