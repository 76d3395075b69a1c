"""
FastAPI dependencies.

The database and services are built once by create_app() and
kept on app.state; these functions hand them to the endpoints.
"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from finance_tracker.exceptions import InvalidToken
from finance_tracker.models.base import Database
from finance_tracker.models.user import User
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_ERROR = "Token missing or invalid"


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_ledger_service(request: Request) -> LedgerService:
    return request.app.state.ledger_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Resolve the bearer token to a user, or answer 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail=TOKEN_ERROR,
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return user_service.resolve_token(credentials.credentials)
    except InvalidToken:
        raise HTTPException(
            status_code=401,
            detail=TOKEN_ERROR,
            headers={"WWW-Authenticate": "Bearer"},
        )
