"""
frontend/auth.py
Authentication state for the asset manager frontend.

Sign-in is handled by the hosted backend's auth API; this module only keeps
the resulting access token and user claims in st.session_state so that every
Streamlit rerun and every API call sees the same state.

- init_auth_state(): call at the top of main() on every rerun
- sign_in(): password grant against the hosted auth API
- set_auth() / clear_auth(): the only writers of auth keys
- get_auth_header(): Authorization header for CSV service calls
- has_admin_access(): admin, manager, or tenant owner (import is admin-only)
"""

from typing import Any, Dict, Optional

import requests
import streamlit as st

try:
    from frontend.config import AUTH_URL, AUTH_ANON_KEY, IS_DEV
except ModuleNotFoundError:
    from config import AUTH_URL, AUTH_ANON_KEY, IS_DEV

ADMIN_ROLES = {"admin", "manager"}


def init_auth_state() -> None:
    """Initialize auth session keys. Idempotent."""
    ss = st.session_state
    ss.setdefault("auth_token", None)
    ss.setdefault("current_user", None)
    ss.setdefault("is_authenticated", False)

    if ss["auth_token"] and not ss["is_authenticated"]:
        ss["is_authenticated"] = True
    elif not ss["auth_token"] and ss["is_authenticated"]:
        ss["is_authenticated"] = False


def set_auth(auth_token: str, current_user: Dict[str, Any]) -> None:
    ss = st.session_state
    ss["auth_token"] = auth_token
    ss["current_user"] = current_user
    ss["is_authenticated"] = True


def clear_auth() -> None:
    """Clear all authentication state. Safe to call multiple times."""
    ss = st.session_state
    ss["auth_token"] = None
    ss["current_user"] = None
    ss["is_authenticated"] = False


def is_authenticated() -> bool:
    return bool(st.session_state.get("auth_token"))


def get_current_user() -> Optional[Dict[str, Any]]:
    return st.session_state.get("current_user")


def get_auth_header() -> Dict[str, str]:
    """{"Authorization": "Bearer <token>"} if authenticated, {} otherwise."""
    token = st.session_state.get("auth_token")
    if token:
        return {"Authorization": f"Bearer {token}"}
    return {}


def _app_metadata(user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if user and isinstance(user, dict):
        return user.get("app_metadata") or {}
    return {}


def get_role() -> str:
    return (_app_metadata(get_current_user()).get("role") or "user").lower()


def has_admin_access() -> bool:
    """Mirror of the backend rule, used only to hide controls; the backend enforces."""
    meta = _app_metadata(get_current_user())
    if meta.get("is_owner"):
        return True
    return get_role() in ADMIN_ROLES


def sign_in(email: str, password: str, timeout: int = 20) -> Optional[str]:
    """
    Sign in with the hosted auth API.

    Returns:
        None on success, otherwise a user-facing error message.
        Never includes the password or token in messages or logs.
    """
    try:
        resp = requests.post(
            f"{AUTH_URL}/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"apikey": AUTH_ANON_KEY, "Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        if IS_DEV:
            print(f"[AUTH] Sign-in request failed: {type(e).__name__}")
        return "Cannot reach the sign-in service. Please try again."

    if resp.status_code != 200:
        if IS_DEV:
            print(f"[AUTH] Sign-in rejected: HTTP {resp.status_code}")
        return "Invalid email or password."

    data = resp.json()
    token = data.get("access_token")
    if not token:
        return "Sign-in response was missing an access token."

    set_auth(token, data.get("user") or {})
    if IS_DEV:
        print(f"[AUTH] Signed in: role={get_role()}")
    return None


def require_auth() -> bool:
    """Guard for protected pages. Returns False (and shows a warning) if signed out."""
    if not is_authenticated():
        st.warning("You must be signed in to access this page.")
        return False
    return True
