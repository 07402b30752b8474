"""Password hashing and validation utilities."""

from __future__ import annotations

import re

import bcrypt

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordService:
    """Service for password hashing and validation.

    Hashes are salted per call and slow by design; the cost factor is
    tunable through ``rounds``. The service holds no per-request state and
    can be shared between concurrent requests.
    """

    # Password complexity requirements
    MIN_LENGTH = 8
    SPECIAL_CHARS = "!@#$%^&*()-+"

    # Security settings
    BCRYPT_ROUNDS = 12

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds or self.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string (salt and cost are embedded)
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_encode(password), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password
            hashed: Hashed password

        Returns:
            True if password matches, False otherwise (including malformed hashes)
        """
        try:
            return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
        except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
            # Invalid hash format or encoding issues
            return False

    def validate_password_strength(self, password: str) -> tuple[bool, list[str]]:
        """Validate password meets complexity requirements.

        Args:
            password: Password to validate

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if len(password) < self.MIN_LENGTH:
            errors.append(f"Password must be at least {self.MIN_LENGTH} characters")

        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")

        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")

        if not re.search(r"\d", password):
            errors.append("Password must contain at least one digit")

        if not any(c in self.SPECIAL_CHARS for c in password):
            errors.append(
                f"Password must contain at least one special character ({self.SPECIAL_CHARS})"
            )

        return len(errors) == 0, errors


# Singleton instance
_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the password service singleton.

    Returns:
        PasswordService instance using the configured bcrypt cost
    """
    global _password_service
    if _password_service is None:
        from employee_api.config import get_settings

        _password_service = PasswordService(rounds=get_settings().bcrypt_rounds)
    return _password_service
