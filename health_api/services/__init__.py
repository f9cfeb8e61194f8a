"""Business logic services for the Health Diary API."""

from health_api.services.auth_service import AuthService
from health_api.services.credential_store import CredentialStore
from health_api.services.token_service import TokenService

__all__ = ["AuthService", "CredentialStore", "TokenService"]
