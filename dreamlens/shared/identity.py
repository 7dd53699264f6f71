"""
Bearer-token verification against an external identity provider.

Every analysis call must resolve to a verified principal before the billed
model call is made. The provider is pluggable: Amazon Cognito (default) or
Supabase Auth, the provider the mobile client signs users in with.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol
import httpx
from botocore.exceptions import BotoCoreError, ClientError
from .aws import cognito_idp_client
from .config import Settings
from .errors import MissingCredential, Unauthorized
from .logging import get_logger
from .models import Principal

log = get_logger(__name__)

_BEARER = "bearer "


class IdentityVerifier(Protocol):
    def verify(self, authorization: Optional[str]) -> Principal: ...


def bearer_token(authorization: Optional[str]) -> str:
    """Extracts the token from an `Authorization` header value.

    A header without the `Bearer ` scheme is taken as the raw token.
    """
    if authorization is None or not authorization.strip():
        raise MissingCredential()
    value = authorization.strip()
    if value.lower().startswith(_BEARER):
        value = value[len(_BEARER):].strip()
    if not value:
        raise Unauthorized()
    return value


def _attr(attributes: List[Dict[str, str]], name: str) -> Optional[str]:
    for a in attributes or []:
        if a.get("Name") == name:
            return a.get("Value")
    return None


class CognitoIdentityVerifier:
    def __init__(self, client: Any):
        self._client = client

    def verify(self, authorization: Optional[str]) -> Principal:
        token = bearer_token(authorization)
        try:
            resp = self._client.get_user(AccessToken=token)
        except ClientError as e:
            log.warning("Cognito rejected token", code=e.response.get("Error", {}).get("Code"))
            raise Unauthorized() from e
        except BotoCoreError as e:
            log.warning("Cognito call failed", error=str(e))
            raise Unauthorized() from e

        attributes = resp.get("UserAttributes") or []
        user_id = _attr(attributes, "sub") or resp.get("Username")
        if not user_id:
            raise Unauthorized()
        return Principal(id=user_id, email=_attr(attributes, "email"))


class SupabaseIdentityVerifier:
    def __init__(self, http: httpx.Client, url: str, api_key: str):
        self._http = http
        self._user_url = f"{url.rstrip('/')}/auth/v1/user"
        self._api_key = api_key

    def verify(self, authorization: Optional[str]) -> Principal:
        token = bearer_token(authorization)
        try:
            resp = self._http.get(
                self._user_url,
                headers={"apikey": self._api_key, "Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            log.warning("Supabase auth call failed", error=str(e))
            raise Unauthorized() from e

        if resp.status_code != 200:
            log.warning("Supabase rejected token", status=resp.status_code)
            raise Unauthorized()
        try:
            user = resp.json()
        except ValueError as e:
            raise Unauthorized() from e
        if not isinstance(user, dict) or not user.get("id"):
            raise Unauthorized()
        return Principal(id=str(user["id"]), email=user.get("email"))


def make_identity_verifier(settings: Settings) -> IdentityVerifier:
    provider = settings.identity_provider.lower()
    if provider == "cognito":
        return CognitoIdentityVerifier(cognito_idp_client(
            settings.aws_region,
            connect_timeout=settings.identity_connect_timeout_seconds,
            read_timeout=settings.identity_timeout_seconds,
        ))
    if provider == "supabase":
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ValueError("Supabase environment variables not configured")
        http = httpx.Client(timeout=httpx.Timeout(
            settings.identity_timeout_seconds, connect=settings.identity_connect_timeout_seconds
        ))
        return SupabaseIdentityVerifier(http, settings.supabase_url, settings.supabase_service_role_key)
    raise ValueError(f"Unknown identity provider: {settings.identity_provider}")
