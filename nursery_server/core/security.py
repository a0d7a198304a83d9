"""
Security helpers.
Issues and verifies the bearer tokens that carry the acting user's id and
role. Role checks happen here, at the HTTP boundary, never in the engine.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import AuthenticationError, PermissionDeniedError
from ..config.settings import settings

SUPER_ADMIN = "SUPER_ADMIN"
ADMIN = "ADMIN"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller"""
    id: int
    role: str


class SecurityManager:
    """Security manager"""

    def __init__(self, secret: str = None, algorithm: str = None, expire_hours: int = None):
        self.secret = secret or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_hours = expire_hours or settings.jwt_expire_hours

    def create_jwt_token(self, actor_id: int, role: str) -> str:
        """Create a signed token for the actor"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(actor_id),
            "role": role,
            "iat": now,
            "exp": now + timedelta(hours=self.expire_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid token: {e}")

    def get_actor_from_token(self, token: str) -> Actor:
        payload = self.decode_jwt_token(token)
        sub, role = payload.get("sub"), payload.get("role")
        if not sub or not role:
            raise AuthenticationError("Token missing subject or role")
        try:
            return Actor(id=int(sub), role=str(role))
        except ValueError:
            raise AuthenticationError("Token subject is not a user id")


# Global security manager
security_manager = SecurityManager()

_bearer = HTTPBearer(auto_error=False)


def get_security_manager() -> SecurityManager:
    return security_manager


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    manager: SecurityManager = Depends(get_security_manager),
) -> Actor:
    """Resolve the bearer token into an Actor"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    return manager.get_actor_from_token(credentials.credentials)


def require_roles(*roles: str) -> Callable[..., Actor]:
    """Build a dependency accepting only the given roles"""

    def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            raise PermissionDeniedError(
                "You must be an admin to access this route",
                details={"required_roles": list(roles)},
            )
        return actor

    return dependency


def create_access_token(actor_id: int, role: str) -> str:
    return security_manager.create_jwt_token(actor_id, role)
