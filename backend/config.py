# backend/config.py
# Environment-aware configuration for the asset manager CSV service

import os
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# JWT verification (tokens are issued by the hosted backend, we only verify)
JWT_SECRET = os.environ.get("JWT_SECRET", "dev-jwt-secret")  # TODO: Require JWT_SECRET outside dev
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = os.environ.get("JWT_AUDIENCE", "authenticated")

# Hosted backend data API (REST endpoint + anon key)
DATA_API_URL = os.environ.get("DATA_API_URL", "http://127.0.0.1:54321").strip().rstrip("/")
DATA_API_KEY = os.environ.get("DATA_API_KEY", "")
DATA_API_TIMEOUT = int(os.environ.get("DATA_API_TIMEOUT", "20"))

# CSV limits
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
PREVIEW_ROWS = int(os.environ.get("PREVIEW_ROWS", "10"))

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:8501",  # Streamlit default
    "http://127.0.0.1:8501",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Data API: {DATA_API_URL}")
print(f"[CONFIG] Max upload: {MAX_UPLOAD_BYTES} bytes, preview rows: {PREVIEW_ROWS}")
