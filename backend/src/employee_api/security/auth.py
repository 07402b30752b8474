"""Session token issuance and bearer authentication."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from employee_api.config import Settings, get_settings
from employee_api.models.domain.role import Role

ROLE_LEVEL_CLAIM = "role_level"


class AuthenticatedEmployee(BaseModel):
    """Identity carried by a validated session token."""

    id: UUID
    email: str
    name: str
    role: Role


class SessionTokenService:
    """Issue signed, time-bounded session tokens.

    Tokens are HMAC-signed JWTs carrying the subject, email, display name,
    role name and numeric role level, plus issuer, audience, issued-at,
    not-before and expiry claims. The service is stateless.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "employee-api",
        audience: str = "employee-app",
        expiration_minutes: int = 60,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expiration = timedelta(minutes=expiration_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionTokenService:
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expiration_minutes=settings.jwt_expiration_minutes,
        )

    def issue(
        self,
        employee_id: UUID,
        email: str,
        full_name: str,
        role: Role,
    ) -> tuple[str, datetime]:
        """Create a signed session token.

        Args:
            employee_id: Employee UUID (token subject)
            email: Employee email
            full_name: Display name
            role: Employee role

        Returns:
            Tuple of (token, expiry timestamp)
        """
        now = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = now + self.expiration

        payload = {
            "sub": str(employee_id),
            "email": email,
            "name": full_name,
            "role": role.name,
            ROLE_LEVEL_CLAIM: role.level,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "nbf": now,
            "exp": expires_at,
        }

        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at

    def decode(self, token: str) -> dict[str, Any]:
        """Decode and verify a session token.

        Signature, expiry, not-before, issuer and audience are all checked.

        Raises:
            JWTError: If the token is invalid or expired
        """
        return jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            audience=self.audience,
            issuer=self.issuer,
        )


# Singleton instance
_token_service: SessionTokenService | None = None


def get_session_token_service() -> SessionTokenService:
    """Get the session token service singleton."""
    global _token_service
    if _token_service is None:
        _token_service = SessionTokenService.from_settings(get_settings())
    return _token_service


async def get_current_employee(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))] = None,
) -> AuthenticatedEmployee:
    """Get the current authenticated employee from the bearer token.

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        AuthenticatedEmployee built from the token claims

    Raises:
        HTTPException: If authentication fails
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        payload = get_session_token_service().decode(credentials.credentials)
        return AuthenticatedEmployee(
            id=UUID(payload["sub"]),
            email=payload["email"],
            name=payload["name"],
            role=Role(payload[ROLE_LEVEL_CLAIM]),
        )
    except (JWTError, KeyError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from e
