"""
Service layer for hospital accounts and login.

Passwords are hashed with bcrypt; only the hash is stored. Successful logins
get a JWT from core.auth.create_access_token().
"""
import logging

import bcrypt

from repositories import HospitalRepository
from schemas import HospitalResponse, LoginResponse
from core.auth import create_access_token
from core.exceptions import (
    DuplicateHospitalError,
    InvalidCredentialsError,
    MissingCredentialsError,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            password_hash.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class HospitalService:
    """Hospital login and account management."""

    def __init__(self, hospital_repository: HospitalRepository):
        self._repo = hospital_repository

    @staticmethod
    def _to_response(hospital: dict) -> HospitalResponse:
        return HospitalResponse(
            id=hospital["id"],
            username=hospital["username"],
            name=hospital["name"],
            area=hospital["area"],
            created_at=hospital["created_at"]
        )

    def login(self, username: str, password: str) -> LoginResponse:
        """
        Check credentials and issue an access token.

        Raises:
            MissingCredentialsError: If username or password is empty.
            InvalidCredentialsError: If no account matches.
        """
        if not username or not password:
            raise MissingCredentialsError()

        hospital = self._repo.get_by_username(username)
        if hospital is None or not verify_password(password, hospital["password_hash"]):
            logger.warning("Failed hospital login", extra={"username": username})
            raise InvalidCredentialsError()

        token, expires_in = create_access_token(
            username=hospital["username"],
            name=hospital["name"],
            area=hospital["area"]
        )
        logger.info("Hospital logged in", extra={"username": username})

        return LoginResponse(
            message="Login successful",
            token=token,
            expires_in=expires_in,
            hospital_name=hospital["name"]
        )

    def register(self, username: str, password: str, name: str, area: str) -> HospitalResponse:
        """
        Create a hospital account.

        Raises:
            DuplicateHospitalError: If the username is taken.
        """
        created = self._repo.add(
            username=username,
            password_hash=hash_password(password),
            name=name,
            area=area
        )
        if created is None:
            raise DuplicateHospitalError(username=username)

        logger.info(f"Hospital account created: {username} (id={created['id']})")
        return self._to_response(created)

    def ensure_default_hospital(self, username: str, password: str, name: str, area: str) -> bool:
        """
        Create the configured default account unless it already exists.

        Returns:
            True if the account was created.
        """
        if self._repo.get_by_username(username) is not None:
            return False

        self.register(username=username, password=password, name=name, area=area)
        logger.info("Default hospital account created", extra={"username": username})
        return True
