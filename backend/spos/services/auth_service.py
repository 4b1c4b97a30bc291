# Overview: Session manager; registered users and the terminal's single current-user record.

"""
Authentication and session handling for a single terminal.

Users live in the users collection; the logged-in operator is a copy of
their User record under current_user. There is one session per store,
not per client: whoever logs in on the terminal is the current user for
every page until logout.

Credentials are compared exactly as entered. Email uniqueness is only
checked at registration time.
"""

from __future__ import annotations

import hmac
import posixpath
from dataclasses import dataclass

from ..models import User
from ..time_utils import now_iso
from ..validation import ValidationError, ConflictError
from .storage_service import KeyValueStore, USERS_KEY, CURRENT_USER_KEY, next_record_id


LOGIN_PAGE = "login"
REGISTER_PAGE = "register"
LANDING_PAGE = "home"
PUBLIC_PAGES = frozenset({LOGIN_PAGE, REGISTER_PAGE})


class DuplicateEmailError(ConflictError):
    """Raised when registering an email that already has an account."""


class InvalidCredentialsError(Exception):
    """Raised when no user matches the email and password pair."""


@dataclass(frozen=True)
class PageAccess:
    page: str
    allowed: bool
    redirect_to: str | None = None


def normalize_page(page: str | None) -> str:
    """'/pos/Home.html' -> 'home'; empty -> 'login'."""
    name = posixpath.basename((page or "").strip()).lower()
    if name.endswith(".html"):
        name = name[: -len(".html")]
    return name or LOGIN_PAGE


class SessionManager:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def list_users(self) -> list[User]:
        return [User.from_dict(row) for row in self.store.read_collection(USERS_KEY)]

    def current_user(self) -> User | None:
        data = self.store.read_json(CURRENT_USER_KEY)
        return User.from_dict(data) if data else None

    def _set_current_user(self, user: User) -> None:
        self.store.write_json(CURRENT_USER_KEY, user.to_dict())

    def register(self, name: str, email: str, password: str) -> User:
        """
        Create an account and log it in.

        Raises:
            ValidationError: a field is missing
            DuplicateEmailError: email already registered (exact match)
        """
        user = self.create_user(name, email, password)
        self._set_current_user(user)
        return user

    def create_user(self, name: str, email: str, password: str) -> User:
        """Add an account without touching the current session."""
        if not name or not email or not password:
            raise ValidationError("Please fill all fields")
        if not all(isinstance(v, str) for v in (name, email, password)):
            raise ValidationError("Name, email and password must be text")

        rows = self.store.read_collection(USERS_KEY)
        if any(row.get("email") == email for row in rows):
            raise DuplicateEmailError("Email already registered")

        user = User(
            id=next_record_id(rows),
            name=name,
            email=email,
            password=password,
            created_at=now_iso(),
        )
        rows.append(user.to_dict())
        self.store.write_collection(USERS_KEY, rows)
        return user

    def login(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Please enter email and password")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be text")

        given = password.encode("utf-8")
        for user in self.list_users():
            if (
                user.email == email
                and isinstance(user.password, str)
                and hmac.compare_digest(user.password.encode("utf-8"), given)
            ):
                self._set_current_user(user)
                return user

        raise InvalidCredentialsError("Invalid email or password")

    def logout(self) -> None:
        self.store.remove_item(CURRENT_USER_KEY)

    def guard_page(self, page: str | None) -> PageAccess:
        """
        Decide whether the current session may open a page.

        - logged out + protected page -> redirect to login
        - logged in + login/register  -> redirect to landing page
        """
        name = normalize_page(page)
        user = self.current_user()

        if user is None and name not in PUBLIC_PAGES:
            return PageAccess(page=name, allowed=False, redirect_to=LOGIN_PAGE)
        if user is not None and name in PUBLIC_PAGES:
            return PageAccess(page=name, allowed=False, redirect_to=LANDING_PAGE)
        return PageAccess(page=name, allowed=True)
