"""
FastAPI dependencies for authentication and authorization.

`get_current_identity` runs on every request (it is installed as an app-level
dependency) and never fails: a missing or bad token simply leaves the request
anonymous. Routes that need an identity add one of the `require_*` gates.
"""

import json
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobly.core import permissions
from jobly.core.logging_config import current_username
from jobly.core.permissions import Identity
from jobly.core.security import JWTError, decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>), optional
bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_FIELD = "_token"


async def _token_from_body(request: Request) -> Optional[str]:
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    body = await request.body()
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get(TOKEN_FIELD), str):
        return payload[TOKEN_FIELD]
    return None


async def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Find the request's credential.

    Checked in order: Authorization header, `_token` query parameter,
    `_token` key of a JSON body.
    """
    if credentials:
        return credentials.credentials
    if TOKEN_FIELD in request.query_params:
        return request.query_params[TOKEN_FIELD]
    return await _token_from_body(request)


async def get_current_identity(
    request: Request,
    token: Optional[str] = Depends(get_token),
) -> Optional[Identity]:
    """
    Decode the request's token and attach the identity to `request.state.user`
    and to the logging context.

    Returns None (and attaches None) when there is no usable token.
    """
    identity = None
    if token:
        try:
            identity = Identity.from_claims(decode_token(token))
        except JWTError as e:
            logger.debug(f"Ignoring invalid token: {e}")

    request.state.user = identity
    current_username.set(identity.username if identity else None)
    return identity


def require_user(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    """Reject anonymous requests with 401."""
    return permissions.require_authenticated(identity)


def require_admin_user(identity: Identity = Depends(require_user)) -> Identity:
    """Reject non-admin identities with 401."""
    return permissions.require_admin(identity)


def require_same_user(username: str, identity: Identity = Depends(require_user)) -> Identity:
    """Reject identities whose subject is not the `{username}` path parameter."""
    return permissions.require_matching_subject(identity, username)
