"""
User service: registration, login and token verification.

Passwords are stored as salted PBKDF2-SHA256 hashes. Tokens are
HS256 JWTs whose subject is the user id; that id is the owner
id every ledger operation is scoped by.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from finance_tracker.config import Settings
from finance_tracker.exceptions import (
    InvalidCredentials,
    InvalidToken,
    InvalidUserData,
    UserAlreadyExists,
)
from finance_tracker.models.user import User
from finance_tracker.schemas.auth import UserCredentials
from finance_tracker.services.user_store import UserStore

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 260_000


def hash_password(password: str, iterations: int = HASH_ITERATIONS) -> str:
    """Return "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations
    ).hex()
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
        iterations = int(iterations)
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations
    ).hex()
    return hmac.compare_digest(digest, expected)


class UserService:

    def __init__(self, store: UserStore, settings: Settings):
        self.store = store
        self.settings = settings

    def register(self, request: UserCredentials) -> User:
        """
        Create a new user.

        The username is trimmed before it is checked and stored.
        """
        username = request.username.strip()
        if len(username) < USERNAME_MIN_LENGTH:
            raise InvalidUserData(
                f"Username must have at least {USERNAME_MIN_LENGTH} characters"
            )
        if len(request.password) < PASSWORD_MIN_LENGTH:
            raise InvalidUserData(
                f"Password must have at least {PASSWORD_MIN_LENGTH} characters"
            )
        if self.store.find_by_username(username):
            raise UserAlreadyExists(username)

        user = self.store.add(username, hash_password(request.password))
        logger.info("Registered user %s (id %s)", user.username, user.id)
        return user

    def login(self, request: UserCredentials) -> tuple[User, str]:
        """Check credentials and return the user with a fresh token."""
        user = self.store.find_by_username(request.username.strip())
        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning("Failed login for %r", request.username)
            raise InvalidCredentials("Invalid username or password")
        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "iat": now,
            "exp": now + timedelta(minutes=self.settings.JWT_EXPIRES_MINUTES),
        }
        return jwt.encode(
            payload, self.settings.JWT_SECRET, algorithm=self.settings.JWT_ALGORITHM
        )

    def resolve_token(self, token: str) -> User:
        """
        Return the user a token was issued for.

        Raises InvalidToken if the token is malformed, expired,
        badly signed, or its user no longer exists.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.JWT_SECRET,
                algorithms=[self.settings.JWT_ALGORITHM],
            )
            user_id = int(payload["sub"])
        except (jwt.PyJWTError, KeyError, ValueError) as e:
            raise InvalidToken("Token missing or invalid") from e

        user = self.store.get(user_id)
        if user is None:
            raise InvalidToken("Token missing or invalid")
        return user
