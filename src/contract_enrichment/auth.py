"""Access token capability injected into the enrichment pipeline.

Acquiring and refreshing tokens is handled elsewhere; the pipeline only asks a
provider for the current token and fails fast when there is none.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from contract_enrichment.exceptions import AuthenticationRequiredError


class AccessToken(BaseModel):
    """Bearer token plus the instance URL it is valid for."""

    access_token: str
    instance_url: str


class TokenProvider(ABC):
    """Supplies the access token for the remote CRM."""

    @abstractmethod
    def get_token(self) -> Optional[AccessToken]:
        pass

    def require_token(self) -> AccessToken:
        """Return the current token or raise AuthenticationRequiredError."""
        token = self.get_token()
        if token is None or not token.access_token or not token.instance_url:
            raise AuthenticationRequiredError()
        return token


class StaticTokenProvider(TokenProvider):
    """Provider holding a token obtained by the caller."""

    def __init__(self, token: Optional[AccessToken]):
        self._token = token

    def get_token(self) -> Optional[AccessToken]:
        return self._token


class EnvTokenProvider(TokenProvider):
    """Reads SF_ACCESS_TOKEN and SF_INSTANCE_URL from the environment."""

    def get_token(self) -> Optional[AccessToken]:
        access_token = (os.environ.get("SF_ACCESS_TOKEN") or "").strip()
        instance_url = (os.environ.get("SF_INSTANCE_URL") or "").strip()
        if not access_token or not instance_url:
            return None
        return AccessToken(access_token=access_token, instance_url=instance_url.rstrip("/"))
