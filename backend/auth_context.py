"""
backend/auth_context.py

Shared authentication context primitives for FastAPI dependency injection.

Authentication itself belongs to the hosted backend: it issues the JWT, we
only verify its signature and read the claims. The CSV layer trusts the
role and owner flag carried in app_metadata.

Contains:
- AuthContext: Immutable per-request identity + CSV capabilities
- require_auth_context: FastAPI dependency for auth enforcement
- verify_token: JWT token verification

This module MUST NOT import backend.main to avoid circular dependencies.
"""

from __future__ import annotations

from typing import Optional, Set

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

try:
    from backend.config import JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE, IS_DEV
    from backend.rbac import effective_capabilities
except ModuleNotFoundError:
    from config import JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE, IS_DEV
    from rbac import effective_capabilities

# Security scheme for HTTPBearer
security = HTTPBearer()


# ---------------------------------------------------------
# JWT Token Verification
# ---------------------------------------------------------
def verify_token(token: str) -> dict:
    """
    Verify JWT access token and return decoded payload.

    Raises:
        HTTPException(401): If token is expired or invalid
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


# ---------------------------------------------------------
# AuthContext
# ---------------------------------------------------------
class AuthContext(BaseModel):
    """
    Immutable identity context derived from the verified JWT.

    Fields:
        user_id: "sub" claim
        email: "email" claim (may be empty)
        tenant_id: app_metadata.tenant_id, if the account belongs to a tenant
        role: app_metadata.role (admin/manager/user), defaults to "user"
        is_owner: app_metadata.is_owner
        capabilities: CSV capabilities derived from role + owner flag
        access_token: raw bearer token, forwarded to the data API
    """
    user_id: str
    email: str = ""
    tenant_id: Optional[str] = None
    role: str = "user"
    is_owner: bool = False
    capabilities: Set[str] = Field(default_factory=set)
    access_token: str = Field("", repr=False)


def context_from_payload(payload: dict, access_token: str = "") -> AuthContext:
    """
    Build an AuthContext from decoded JWT claims.

    Raises:
        HTTPException(401): If the "sub" claim is missing
    """
    user_id = payload.get("sub")
    if not user_id:
        print("[AUTH] Missing user_id in token payload")
        raise HTTPException(status_code=401, detail="Invalid token payload")

    app_metadata = payload.get("app_metadata") or {}
    role = (app_metadata.get("role") or "user").lower()
    is_owner = bool(app_metadata.get("is_owner", False))

    return AuthContext(
        user_id=str(user_id),
        email=payload.get("email") or "",
        tenant_id=app_metadata.get("tenant_id"),
        role=role,
        is_owner=is_owner,
        capabilities=effective_capabilities(role, is_owner),
        access_token=access_token,
    )


def require_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthContext:
    """
    Auth context dependency for FastAPI routes.

    Usage:
        @router.get("/protected")
        def protected_route(ctx: AuthContext = Depends(require_auth_context)):
            ...

    Raises:
        HTTPException(401): If token is invalid, expired, or has no subject
    """
    payload = verify_token(credentials.credentials)
    ctx = context_from_payload(payload, access_token=credentials.credentials)

    if IS_DEV:
        print(f"[AUTH] Authenticated: user_id={ctx.user_id}, tenant_id={ctx.tenant_id}, "
              f"role={ctx.role}, is_owner={ctx.is_owner}, capabilities={len(ctx.capabilities)}")

    return ctx
