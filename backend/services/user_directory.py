import logging

from werkzeug.security import generate_password_hash, check_password_hash

from errors import Conflict, Unauthenticated, ValidationError

logger = logging.getLogger(__name__)


class UserDirectory:
    """Minimal identity store backing login.

    Hashing and the constant-time comparison are delegated to werkzeug.
    """

    def __init__(self, users, hash_password=generate_password_hash, verify_password=check_password_hash):
        self.users = users
        self._hash_password = hash_password
        self._verify_password = verify_password
        self._dummy_hash = None

    def create_user(self, username, credential, wallet_address=None):
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("Username is required")
        if not isinstance(credential, str) or not credential:
            raise ValidationError("Password is required")
        username = username.strip()
        if wallet_address is not None:
            wallet_address = wallet_address.strip() or None

        if self.users.get_by_username(username) is not None:
            raise Conflict("Username already exists")
        if wallet_address and self.users.get_by_wallet_address(wallet_address) is not None:
            raise Conflict("Wallet address already registered")

        user = self.users.add(username, self._hash_password(credential), wallet_address)
        logger.info("[AUTH] Registered user %s", user.id)
        return user

    def find_by_username(self, username):
        return self.users.get_by_username(username)

    def find_by_id(self, user_id):
        return self.users.get(user_id)

    def find_by_wallet_address(self, wallet_address):
        return self.users.get_by_wallet_address(wallet_address)

    def authenticate(self, username, credential):
        user = self.users.get_by_username((username or "").strip())
        if user is None:
            # Unknown usernames still pay for one hash comparison
            if self._dummy_hash is None:
                self._dummy_hash = self._hash_password("unused-credential")
            self._verify_password(self._dummy_hash, credential or "")
            logger.info("[AUTH] Failed login attempt")
            raise Unauthenticated("Invalid credentials")
        if not self._verify_password(user.password_hash, credential or ""):
            logger.info("[AUTH] Failed login attempt")
            raise Unauthenticated("Invalid credentials")
        logger.info("[AUTH] Login successful for user %s", user.id)
        return user
