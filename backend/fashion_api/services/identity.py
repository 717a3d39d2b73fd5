"""
Identity provider client.

Bearer tokens are verified locally with python-jose; account lookups go to the
provider's admin REST endpoint.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger(__name__)


@dataclass
class TokenClaims:
    """Decoded claims of a verified bearer token"""
    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    name: Optional[str] = None
    picture: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "email": self.email,
            "email_verified": self.email_verified,
            "name": self.name,
            "picture": self.picture,
        }


@dataclass
class ProviderUser:
    """Account record as held by the identity provider"""
    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class TokenVerificationError(Exception):
    """Bearer token could not be verified."""

    def __init__(self, message: str, reason: str = "invalid"):
        self.message = message
        self.reason = reason
        super().__init__(message)


class IdentityProviderError(Exception):
    """Identity provider lookup failed."""


class IdentityProvider:
    def __init__(
        self,
        secret: str,
        algorithms: List[str],
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        admin_url: str = "",
        api_key: str = "",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.secret = secret
        self.algorithms = algorithms
        self.audience = audience or None
        self.issuer = issuer or None
        self.admin_url = admin_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "IdentityProvider":
        return cls(
            secret=settings.IDENTITY_TOKEN_SECRET,
            algorithms=settings.IDENTITY_TOKEN_ALGORITHMS,
            audience=settings.IDENTITY_TOKEN_AUDIENCE,
            issuer=settings.IDENTITY_TOKEN_ISSUER,
            admin_url=settings.IDENTITY_PROVIDER_URL,
            api_key=settings.IDENTITY_PROVIDER_API_KEY,
            timeout=settings.IDENTITY_PROVIDER_TIMEOUT_SECONDS,
            session=session,
        )

    @property
    def configured(self) -> bool:
        return bool(self.secret)

    def verify_token(self, token: str) -> TokenClaims:
        """Verify and decode a bearer token.

        Raises:
            TokenVerificationError: with reason "expired", "signature" or "invalid"
        """
        if not self.configured:
            raise TokenVerificationError("Invalid or expired token")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError:
            raise TokenVerificationError("Token expired. Please login again.", reason="expired")
        except JWTError as e:
            if "signature" in str(e).lower():
                raise TokenVerificationError("Invalid token signature", reason="signature")
            raise TokenVerificationError("Invalid or expired token")

        uid = payload.get("uid") or payload.get("user_id") or payload.get("sub")
        if not uid:
            raise TokenVerificationError("Invalid or expired token")

        return TokenClaims(
            uid=str(uid),
            email=payload.get("email"),
            email_verified=bool(payload.get("email_verified", False)),
            name=payload.get("name"),
            picture=payload.get("picture"),
        )

    def get_user(self, uid: str) -> ProviderUser:
        """Look up an account at the provider by its subject id.

        Raises:
            IdentityProviderError: unknown account, provider not configured or unreachable
        """
        if not self.admin_url:
            raise IdentityProviderError("Identity provider admin endpoint is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            response = self.session.get(
                f"{self.admin_url}/users/{uid}", headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Identity provider lookup failed for {uid}: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}")

        if response.status_code == 404:
            raise IdentityProviderError(f"No user record found for uid {uid}")
        if not response.ok:
            raise IdentityProviderError(f"Identity provider returned {response.status_code}")

        data = response.json()
        return ProviderUser(
            uid=data.get("uid", uid),
            email=data.get("email"),
            email_verified=bool(data.get("emailVerified", False)),
            display_name=data.get("displayName"),
            photo_url=data.get("photoURL"),
        )

    def ping(self) -> Dict[str, Any]:
        """Configuration status for the health endpoint."""
        return {
            "tokenVerification": "configured" if self.configured else "not_configured",
            "adminLookup": "configured" if self.admin_url else "not_configured",
            "algorithms": self.algorithms,
        }

    def close(self) -> None:
        self.session.close()
