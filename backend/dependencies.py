"""
backend/dependencies.py

Reusable FastAPI dependencies for capability enforcement and record store injection.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException

try:
    from backend.auth_context import require_auth_context, AuthContext
    from backend.config import IS_DEV
    from backend.record_store import RecordStore, RestRecordStore
except ModuleNotFoundError:
    from auth_context import require_auth_context, AuthContext
    from config import IS_DEV
    from record_store import RecordStore, RestRecordStore


def require_capability(capability: str) -> Callable:
    """
    FastAPI dependency factory for capability authorization.

    Usage in routes:
        @router.post("/import/{entity_kind}")
        def import_csv(ctx: AuthContext = Depends(require_capability("csv:import"))):
            ...

    Args:
        capability: The capability string to check (e.g., "csv:import")

    Returns:
        A dependency function that enforces the capability and returns the AuthContext

    Raises:
        HTTPException(403): If the user lacks the required capability
    """
    def _check_capability(ctx: AuthContext = Depends(require_auth_context)) -> AuthContext:
        if capability not in ctx.capabilities:
            if IS_DEV:
                print(f"[AUTHZ] Capability denied: capability={capability}, "
                      f"role={ctx.role}, is_owner={ctx.is_owner}")
            raise HTTPException(
                status_code=403,
                detail="Insufficient permissions - this action requires admin access",
            )

        if IS_DEV:
            print(f"[AUTHZ] Capability granted: capability={capability}, role={ctx.role}")
        return ctx

    return _check_capability


def get_record_store(ctx: AuthContext = Depends(require_auth_context)) -> RecordStore:
    """
    Record store for the current caller. Override in tests via
    app.dependency_overrides[get_record_store].
    """
    return RestRecordStore(access_token=ctx.access_token)
