"""
Mock authentication for the demo accounts.

Credentials are checked against PBKDF2 hashes of the two built-in accounts;
the logged-in user is kept in local storage so a restart restores it.
"""

from typing import Dict, NamedTuple, Optional

from pydantic import ValidationError as ModelValidationError

from ..exceptions import AuthenticationError
from ..models import User, UserRole
from ..storage import LocalStorage
from ..utils import get_logger, hash_password, verify_password

SESSION_KEY = "inventory-user"


class DemoAccount(NamedTuple):
    user: User
    password_hash: bytes
    salt: bytes


def _demo_account(user: User, password: str) -> DemoAccount:
    password_hash, salt = hash_password(password)
    return DemoAccount(user, password_hash, salt)


def build_demo_accounts() -> Dict[str, DemoAccount]:
    """The admin and staff accounts, keyed by email."""
    accounts = [
        _demo_account(
            User(id="1", name="Admin User", email="admin@company.com", role=UserRole.ADMIN),
            "admin123",
        ),
        _demo_account(
            User(id="2", name="Staff User", email="staff@company.com", role=UserRole.STAFF),
            "staff123",
        ),
    ]
    return {account.user.email: account for account in accounts}


class AuthService:
    """Login, logout and session restore."""

    def __init__(self, storage: LocalStorage, accounts: Optional[Dict[str, DemoAccount]] = None) -> None:
        """
        Initialize auth service.

        Args:
            storage: Local storage holding the session
            accounts: Accounts keyed by email (defaults to the demo accounts)
        """
        self.storage = storage
        self.accounts = accounts if accounts is not None else build_demo_accounts()
        self.logger = get_logger("auth_service")
        self.user: Optional[User] = None

    def login(self, email: str, password: str) -> User:
        """
        Log in with email and password.

        Returns:
            The authenticated User

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        account = self.accounts.get(email.strip().lower())
        if account is None or not verify_password(password, account.password_hash, account.salt):
            self.logger.warning(f"Failed login attempt for {email}")
            raise AuthenticationError(email=email)

        self.user = account.user
        self.storage.set_json(SESSION_KEY, self.user.model_dump(mode="json"))
        self.logger.info(f"{self.user.name} logged in ({self.user.role.value})")
        return self.user

    def logout(self) -> None:
        if self.user is not None:
            self.logger.info(f"{self.user.name} logged out")
        self.user = None
        self.storage.remove_item(SESSION_KEY)

    def current_user(self) -> Optional[User]:
        """
        Get the logged-in user, restoring a stored session if needed.

        A corrupt stored session is discarded.
        """
        if self.user is not None:
            return self.user

        try:
            data = self.storage.get_json(SESSION_KEY)
            if data is not None:
                self.user = User(**data)
        except (ValueError, TypeError, ModelValidationError) as e:
            self.logger.error(f"Discarding invalid stored session: {e}")
            self.storage.remove_item(SESSION_KEY)
            self.user = None

        return self.user
