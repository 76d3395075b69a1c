"""
In-memory user store.
"""

from sqlalchemy import select

from finance_tracker.models.base import Database
from finance_tracker.models.user import User


class UserStore:

    def __init__(self, database: Database):
        self.database = database

    def add(self, username: str, password_hash: str) -> User:
        with self.database.session_scope() as session:
            user = User(username=username, password_hash=password_hash)
            session.add(user)
            session.flush()
        return user

    def find_by_username(self, username: str) -> User | None:
        with self.database.session_scope() as session:
            return session.execute(
                select(User).where(User.username == username)
            ).scalar_one_or_none()

    def get(self, user_id: int) -> User | None:
        with self.database.session_scope() as session:
            return session.get(User, user_id)
