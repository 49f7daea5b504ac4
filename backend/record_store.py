"""
backend/record_store.py

Client for the hosted backend's REST data API.

The CSV engine never talks to the network itself. Routes receive a
RecordStore through dependency injection (see dependencies.get_record_store),
so the pure CSV code stays testable and tests can swap in a fake store.

Security:
- The caller's bearer token is forwarded so the hosted backend's row-level
  security applies to every read and write.
- Tokens and row contents are never printed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests

try:
    from backend.config import DATA_API_URL, DATA_API_KEY, DATA_API_TIMEOUT, IS_DEV
    from backend.models import EntityKind, parse_entity_kind
    from backend.schemas_csv import AssetImportRow, EmployeeImportRow
except ModuleNotFoundError:
    from config import DATA_API_URL, DATA_API_KEY, DATA_API_TIMEOUT, IS_DEV
    from models import EntityKind, parse_entity_kind
    from schemas_csv import AssetImportRow, EmployeeImportRow


TABLES = {
    EntityKind.asset: "assets",
    EntityKind.employee: "employees",
}


class RecordStoreError(Exception):
    """The data API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RecordStore(Protocol):
    def fetch_records(self, entity_kind) -> List[Dict[str, Any]]:
        ...

    def insert_assets(self, rows: Sequence[AssetImportRow]) -> int:
        ...

    def upsert_employee(self, row: EmployeeImportRow) -> None:
        ...


class RestRecordStore:
    """RecordStore backed by the hosted backend's PostgREST-style API."""

    def __init__(
        self,
        access_token: str,
        base_url: str = DATA_API_URL,
        api_key: str = DATA_API_KEY,
        timeout: int = DATA_API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _send(self, method: str, table: str, **kwargs) -> requests.Response:
        try:
            resp = self.session.request(method, self._url(table), timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            if IS_DEV:
                print(f"[STORE] Timeout on {method} {table}")
            raise RecordStoreError(f"Data API timed out after {self.timeout}s")
        except requests.exceptions.ConnectionError:
            if IS_DEV:
                print(f"[STORE] Connection error on {method} {table}")
            raise RecordStoreError("Cannot connect to data API")

        if resp.status_code >= 400:
            if IS_DEV:
                print(f"[STORE] {method} {table} failed: HTTP {resp.status_code}")
            try:
                detail = resp.json().get("message") or resp.text
            except ValueError:
                detail = resp.text
            raise RecordStoreError(f"Data API error ({resp.status_code}): {detail[:200]}", resp.status_code)
        return resp

    def fetch_records(self, entity_kind) -> List[Dict[str, Any]]:
        kind = parse_entity_kind(entity_kind)
        if kind is EntityKind.employee:
            resp = self._send(
                "GET", TABLES[kind], headers=self._headers(),
                params={"select": "full_name,email,role", "order": "full_name.asc"},
            )
            return [
                {"name": r.get("full_name") or "", "email": r.get("email"), "role": r.get("role")}
                for r in resp.json()
            ]

        resp = self._send(
            "GET", TABLES[kind], headers=self._headers(),
            params={"select": "*", "order": "created_at.desc"},
        )
        return list(resp.json())

    def insert_assets(self, rows: Sequence[AssetImportRow]) -> int:
        if not rows:
            return 0
        payload = [row.dict() for row in rows]
        resp = self._send(
            "POST", TABLES[EntityKind.asset],
            headers=self._headers(prefer="return=representation"),
            json=payload,
        )
        inserted = resp.json()
        if IS_DEV:
            print(f"[STORE] Inserted assets: {len(inserted)}")
        return len(inserted)

    def upsert_employee(self, row: EmployeeImportRow) -> None:
        payload = row.dict(exclude_none=True)
        self._send(
            "POST", TABLES[EntityKind.employee],
            headers=self._headers(prefer="resolution=merge-duplicates"),
            params={"on_conflict": "full_name"},
            json=payload,
        )
