"""Security package."""

from employee_api.security.authorization import AuthorizationPolicy
from employee_api.security.password import PasswordService, get_password_service

__all__ = [
    "AuthorizationPolicy",
    "PasswordService",
    "get_password_service",
]
