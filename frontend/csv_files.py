# frontend/csv_files.py
# Browser-side CSV helpers: decoding uploads, preview tables, download buttons

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

import pandas as pd
import streamlit as st

CSV_MIME = "text/csv;charset=utf-8"


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8 (BOM tolerant), falling back to latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def dated_filename(base: str, today: Optional[date] = None) -> str:
    """<base>-<YYYY-MM-DD>.csv"""
    today = today or date.today()
    return f"{base}-{today.isoformat()}.csv"


def filename_from_disposition(header: Optional[str], default: str) -> str:
    """Pull filename="..." out of a Content-Disposition header."""
    if header and "filename=" in header:
        return header.split("filename=", 1)[1].strip().strip('"') or default
    return default


RECORD_COUNT_HEADER = "X-Record-Count"


def record_count(headers) -> Optional[int]:
    """Exported record count from the response headers; None if absent or malformed."""
    try:
        return int(headers.get(RECORD_COUNT_HEADER))
    except (TypeError, ValueError):
        return None


def trigger_download(csv_text: str, base: str, label: str = "Download CSV", key: Optional[str] = None) -> bool:
    """
    Offer csv_text as a dated file download (<base>-<YYYY-MM-DD>.csv).

    Returns True on the rerun in which the user clicked the button.
    """
    return st.download_button(
        label,
        data=csv_text.encode("utf-8"),
        file_name=dated_filename(base),
        mime=CSV_MIME,
        key=key,
    )


def preview_frame(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """
    Table for the import preview. Ragged rows are padded/truncated for display
    only; the validator has already reported the mismatch.
    """
    width = len(headers)
    columns: List[str] = []
    for i, h in enumerate(headers):
        name = h if h else f"column_{i + 1}"
        # st.dataframe rejects duplicate column names
        if name in columns:
            name = f"{name}_{i + 1}"
        columns.append(name)
    padded: List[List[str]] = [list(r[:width]) + [""] * (width - len(r)) for r in rows]
    return pd.DataFrame(padded, columns=columns)
