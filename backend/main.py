# ---------------------------------------------------------
# backend/main.py
# Asset Manager - CSV import/export service
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI, no local database (persistence lives in the hosted backend)
# - /api/csv/templates/{kind} : download import template
# - /api/csv/validate/{kind}  : validate uploaded CSV, return preview
# - /api/csv/import/{kind}    : validate + import via data API
# - /api/csv/export/{kind}    : export records as dated CSV
# ---------------------------------------------------------

from __future__ import annotations

from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

try:
    from backend.config import CORS_ORIGINS, IS_PROD, ENV
    from backend.routes_csv import router as csv_router
except ModuleNotFoundError:
    from config import CORS_ORIGINS, IS_PROD, ENV
    from routes_csv import router as csv_router


app = FastAPI(title="Asset Manager CSV Service", version="0.1")

# CORS configuration from config module
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if IS_PROD else ["*"],  # Restrict origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(csv_router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "env": ENV}
