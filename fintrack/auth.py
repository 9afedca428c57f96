"""Bearer token authorization for the API"""
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException
from jwt import PyJWKClient
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.database import User, get_db
from fintrack.errors import AuthenticationError
from fintrack.logger import create_logger
from fintrack.security import decode_access_token
from fintrack.services.users import upsert_user

logger = create_logger("auth")


class BearerAuthorization:
    """
    Resolves the calling user from an `Authorization: Bearer <token>` header.

    Two kinds of token are accepted:
    - local HS256 tokens issued by /api/auth/login and /api/auth/register
    - RS256 tokens from Auth0, when AUTH0_DOMAIN and AUTH0_AUDIENCE are set;
      their subject is upserted as a user on first sight
    """

    def __init__(self):
        self.auth0_domain = settings.auth0_domain
        self.auth0_audience = settings.auth0_audience

        if self.external_enabled():
            # Initialize JWKS client for token validation
            jwks_url = f"https://{self.auth0_domain}/.well-known/jwks.json"
            self.jwks_client = PyJWKClient(jwks_url)
            logger.info("External identity provider enabled", {"auth0_domain": self.auth0_domain})
        else:
            self.jwks_client = None

    def external_enabled(self) -> bool:
        """Check if identity-provider tokens are accepted"""
        return bool(self.auth0_domain and self.auth0_audience)

    def www_authenticate_header(self, realm: str = "fintrack") -> str:
        if not self.external_enabled():
            return f'Bearer realm="{realm}"'
        return f'Bearer realm="{realm}", as_uri="https://{self.auth0_domain}"'

    def unauthorized(self, detail: str) -> HTTPException:
        return HTTPException(
            status_code=401,
            detail=detail,
            headers={"WWW-Authenticate": self.www_authenticate_header()},
        )

    @staticmethod
    def extract_token(authorization: Optional[str]) -> str:
        if not authorization:
            raise AuthenticationError("Missing authorization header")
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationError("Invalid authorization header format. Expected: Bearer <token>")
        return parts[1]

    def validate_external_token(self, token: str) -> dict:
        """Verify an identity-provider token against the provider's JWKS"""
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.auth0_audience,
                issuer=f"https://{self.auth0_domain}/",
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidAudienceError:
            raise AuthenticationError("Invalid token audience")
        except jwt.InvalidIssuerError:
            raise AuthenticationError("Invalid token issuer")
        except jwt.PyJWKClientError as e:
            raise AuthenticationError(f"Unable to resolve signing key: {e}")
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid token: {e}")

    def resolve_user_id(self, db: Session, authorization: Optional[str]) -> str:
        """Return the id of the authenticated user or raise AuthenticationError"""
        token = self.extract_token(authorization)

        try:
            algorithm = jwt.get_unverified_header(token).get("alg")
        except jwt.DecodeError:
            raise AuthenticationError("Malformed token")

        if algorithm == "RS256" and self.external_enabled():
            claims = self.validate_external_token(token)
            subject = claims.get("sub")
            if not subject:
                raise AuthenticationError("Token has no subject")
            return upsert_user(db, subject, claims).id

        claims = decode_access_token(token)
        user_id = claims["sub"]
        if db.get(User, user_id) is None:
            raise AuthenticationError("Unknown user")
        return user_id


# Global authorization instance
bearer_auth = BearerAuthorization()


def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> str:
    """FastAPI dependency: the authenticated user's id, 401 otherwise."""
    try:
        return bearer_auth.resolve_user_id(db, authorization)
    except AuthenticationError as e:
        logger.debug("Authentication failed", {"reason": str(e)})
        raise bearer_auth.unauthorized(str(e))
