"""
Access-control gates.

Each gate is a pure decision over the current identity (None when the request
carried no valid credential) and the request target. A gate either returns the
identity it was given or raises UnauthorizedError; callers run them in order
and stop at the first failure.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from jobly.core.exceptions import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """Decoded token claims attached to a request."""
    username: str
    is_admin: bool = False

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> Optional["Identity"]:
        username = claims.get("sub")
        if not isinstance(username, str) or not username:
            return None
        return cls(username=username, is_admin=claims.get("is_admin") is True)


def require_authenticated(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_admin(identity: Optional[Identity]) -> Identity:
    if identity is None or identity.is_admin is not True:
        raise UnauthorizedError("Unauthorized, admin access only")
    return identity


def require_matching_subject(identity: Optional[Identity], username: str) -> Identity:
    """Self-service gate: the token's subject must be the user being changed."""
    if identity is None or identity.username != username:
        raise UnauthorizedError()
    return identity
