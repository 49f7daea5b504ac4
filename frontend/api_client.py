"""
frontend/api_client.py
Centralized API client for all CSV service requests.

This module ensures:
1. All API calls attach the Authorization header
2. Consistent handling of 401/403 (session expiry / admin-only actions)
3. One place that knows the service base URL
"""

from typing import Any, Dict, Literal, Optional

import requests
import streamlit as st

try:
    from frontend.config import get_api_base_url, IS_DEV
    from frontend.auth import get_auth_header, clear_auth
except ModuleNotFoundError:
    from config import get_api_base_url, IS_DEV
    from auth import get_auth_header, clear_auth


__all__ = ["api_request", "error_detail"]


def api_request(
    method: Literal["GET", "POST"],
    path: str,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: int = 30,
) -> Optional[requests.Response]:
    """
    Make an API request with auth header attachment and error handling.

    Returns:
        Response object for any HTTP status the caller should handle
        (2xx, 4xx other than 401, 5xx), None on connection/config errors
        or expired sessions (a user-facing message has already been shown).

    Security:
        Never logs or prints tokens/auth headers.
    """
    try:
        base_url = get_api_base_url()
    except RuntimeError as e:
        st.error(f"Configuration error: {e}")
        return None

    url = f"{base_url}{path}"
    headers = {"Accept": "application/json, text/csv"}
    headers.update(get_auth_header())

    try:
        if method == "GET":
            resp = requests.get(url, headers=headers, params=params, timeout=timeout)
        elif method == "POST":
            resp = requests.post(url, json=json, headers=headers, params=params, timeout=timeout)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")
    except requests.exceptions.Timeout:
        if IS_DEV:
            print(f"[API] Timeout on {method} {path}")
        st.error(f"Request timed out after {timeout}s. Please try again.")
        return None
    except requests.exceptions.ConnectionError:
        if IS_DEV:
            print(f"[API] Connection error on {method} {path}")
        st.error(f"Cannot connect to backend at {base_url}. Please check your connection.")
        return None

    if resp.status_code == 401:
        if IS_DEV:
            print(f"[API] 401 on {path}, clearing session")
        st.warning("Your session has expired. Please sign in again.")
        clear_auth()
        return None

    if resp.status_code == 403:
        if IS_DEV:
            print(f"[API] 403 Forbidden on {path}")
        st.error("You don't have permission to perform this action.")

    return resp


def error_detail(resp: requests.Response) -> Any:
    """Best-effort "detail" from a FastAPI error response."""
    try:
        return resp.json().get("detail", resp.text)
    except ValueError:
        return resp.text
