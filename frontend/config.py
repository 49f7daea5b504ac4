# frontend/config.py
# Environment-aware configuration for the asset manager frontend

import os
from typing import Literal

# Environment detection - normalize to lowercase
_raw_env = os.environ.get("ENV", "production").lower()
ENV: Literal["local", "staging", "production"] = _raw_env if _raw_env in ("local", "staging", "production") else "production"  # type: ignore

# Environment flags (using normalized ENV)
IS_DEV = (ENV == "local")

# Hosted backend (auth) - the CSV service never sees passwords
AUTH_URL = os.environ.get("AUTH_URL", "http://127.0.0.1:54321").strip().rstrip("/")
AUTH_ANON_KEY = os.environ.get("AUTH_ANON_KEY", "")

# Upload / preview limits (display only; backend enforces)
MAX_UPLOAD_MB = int(os.environ.get("MAX_UPLOAD_MB", "5"))
PREVIEW_ROWS = int(os.environ.get("PREVIEW_ROWS", "10"))


def validate_api_url(url: str, env: str) -> None:
    """
    Validate API base URL according to environment security rules.

    Args:
        url: The API base URL to validate
        env: Current environment ("local", "staging", "production")

    Raises:
        ValueError: If URL violates security constraints for the environment
    """
    if not url:
        raise ValueError("API base URL cannot be empty")

    # Production/staging must use HTTPS and never localhost
    if env in ("staging", "production"):
        if not url.startswith("https://"):
            raise ValueError(f"Production/staging must use HTTPS. Got: {url}")
        if "127.0.0.1" in url or "localhost" in url:
            raise ValueError(f"Production/staging cannot use localhost URLs. Got: {url}")


def get_api_base_url() -> str:
    """
    Get the CSV service base URL.

    Priority:
    1. BACKEND_URL environment variable
    2. Local dev default (http://127.0.0.1:8000) ONLY if ENV == "local"
    3. Raise error if production/staging with no configured URL

    Raises:
        RuntimeError: If production/staging environment has no configured URL
    """
    backend_url = os.environ.get("BACKEND_URL", "").strip()
    if backend_url:
        url = backend_url.rstrip("/")
        validate_api_url(url, ENV)
        return url

    if ENV == "local":
        return "http://127.0.0.1:8000"

    raise RuntimeError(
        f"Backend URL not configured for {ENV.upper()} environment. "
        f"Set BACKEND_URL to the CSV service URL. "
        f"Production/staging MUST use HTTPS and cannot fall back to localhost."
    )


print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Auth URL: {AUTH_URL}")
