# frontend/app.py
# Asset Manager – CSV import / export
#
# Run from repo root: streamlit run frontend/app.py
# Or from frontend folder: streamlit run app.py

from __future__ import annotations

from typing import Any, Dict

import streamlit as st

try:
    from frontend.config import ENV, IS_DEV, MAX_UPLOAD_MB, PREVIEW_ROWS
except ModuleNotFoundError:
    from config import ENV, IS_DEV, MAX_UPLOAD_MB, PREVIEW_ROWS

try:
    from frontend.auth import (
        init_auth_state, clear_auth, is_authenticated, require_auth,
        get_current_user, get_role, has_admin_access, sign_in,
    )
except ModuleNotFoundError:
    from auth import (
        init_auth_state, clear_auth, is_authenticated, require_auth,
        get_current_user, get_role, has_admin_access, sign_in,
    )

try:
    from frontend.api_client import api_request, error_detail
    from frontend.csv_files import decode_upload, filename_from_disposition, preview_frame, record_count, trigger_download
except ModuleNotFoundError:
    from api_client import api_request, error_detail
    from csv_files import decode_upload, filename_from_disposition, preview_frame, record_count, trigger_download


ENTITY_LABELS = {
    "asset": "Assets",
    "employee": "Employees",
}

EXPORT_BASENAMES = {
    "asset": "assets-export",
    "employee": "employees-export",
}


# --------------------------------------------------------------------
# Sidebar: sign-in / session
# --------------------------------------------------------------------

def render_sidebar() -> str:
    """Sign-in form or session info; returns the selected entity kind."""
    with st.sidebar:
        st.title("Asset Manager")
        if ENV != "production":
            st.caption(f"Environment: {ENV}")

        if not is_authenticated():
            with st.form("sign_in"):
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign in")
            if submitted:
                error = sign_in(email.strip(), password)
                if error:
                    st.error(error)
                else:
                    st.rerun()
        else:
            user = get_current_user() or {}
            st.write(f"Signed in as **{user.get('email', '')}**")
            st.caption(f"Role: {get_role()}")
            if st.button("🚪 Sign out", key="logout_btn", use_container_width=True):
                clear_auth()
                st.rerun()

        return st.radio(
            "Data",
            list(ENTITY_LABELS.keys()),
            format_func=lambda k: ENTITY_LABELS[k],
            key="nav_entity",
        )


# --------------------------------------------------------------------
# Export + template
# --------------------------------------------------------------------

def render_export(kind: str) -> None:
    label = ENTITY_LABELS[kind]
    st.subheader(f"Export {label.lower()}")

    if st.button(f"Prepare {label.lower()} export", key=f"export_{kind}"):
        resp = api_request("GET", f"/api/csv/export/{kind}")
        if resp is None:
            return
        if resp.status_code != 200:
            st.error(f"Export failed: {error_detail(resp)}")
            return
        st.session_state[f"_export_{kind}"] = resp.text
        st.session_state[f"_export_count_{kind}"] = record_count(resp.headers)

    csv_text = st.session_state.get(f"_export_{kind}")
    if csv_text is None:
        return
    if not csv_text:
        st.warning(f"There are no {label.lower()} available to export.")
        return

    rows = st.session_state.get(f"_export_count_{kind}")
    if rows is not None:
        st.caption(f"{rows} {label.lower()} ready")
    trigger_download(csv_text, EXPORT_BASENAMES[kind], label="Download CSV", key=f"dl_export_{kind}")


def render_template(kind: str) -> None:
    resp = api_request("GET", f"/api/csv/templates/{kind}")
    if resp is None or resp.status_code != 200:
        return
    filename = filename_from_disposition(
        resp.headers.get("content-disposition"), f"{kind}-import-template.csv"
    )
    st.download_button(
        "Download import template",
        data=resp.content,
        file_name=filename,
        mime="text/csv",
        key=f"dl_template_{kind}",
    )


# --------------------------------------------------------------------
# Import: upload -> validate -> preview -> confirm
# --------------------------------------------------------------------

def render_import(kind: str) -> None:
    label = ENTITY_LABELS[kind]
    st.subheader(f"Import {label.lower()}")
    render_template(kind)

    if not has_admin_access():
        st.info("Bulk import requires admin access.")
        return

    upload = st.file_uploader(
        f"CSV file (max {MAX_UPLOAD_MB} MB)", type=["csv"], key=f"upload_{kind}"
    )
    if upload is None:
        return

    csv_text = decode_upload(upload.getvalue())
    resp = api_request("POST", f"/api/csv/validate/{kind}", json={"csv_text": csv_text})
    if resp is None:
        return
    if resp.status_code != 200:
        st.error(f"Validation failed: {error_detail(resp)}")
        return

    preview: Dict[str, Any] = resp.json()
    headers = preview.get("headers", [])
    row_count = preview.get("row_count", 0)

    if not headers or row_count == 0:
        st.error("The file appears to be empty or improperly formatted.")
        return

    st.dataframe(preview_frame(headers, preview.get("preview_rows", [])), use_container_width=True)
    if row_count > PREVIEW_ROWS:
        st.caption(f"Showing {PREVIEW_ROWS} of {row_count} rows")

    result = preview.get("result", {})
    if not result.get("valid"):
        errors = result.get("errors", [])
        st.error(f"{len(errors)} problem(s) found. Fix the file and upload it again.")
        st.markdown("\n".join(f"- {e}" for e in errors))
        return

    if st.button(f"Import {row_count} records", type="primary", key=f"confirm_{kind}"):
        with st.spinner("Importing..."):
            resp = api_request("POST", f"/api/csv/import/{kind}", json={"csv_text": csv_text})
        if resp is None:
            return
        if resp.status_code == 200:
            summary = resp.json()
            st.success(f"{summary.get('imported', 0)} {label.lower()} imported.")
            st.session_state.pop(f"_export_{kind}", None)
            st.session_state.pop(f"_export_count_{kind}", None)
        elif resp.status_code == 422:
            detail = error_detail(resp)
            errors = detail.get("errors", []) if isinstance(detail, dict) else [str(detail)]
            st.error("Import rejected:")
            st.markdown("\n".join(f"- {e}" for e in errors))
        elif resp.status_code != 403:
            st.error(f"Import failed: {error_detail(resp)}")


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------

def main() -> None:
    st.set_page_config(page_title="Asset Manager – CSV", page_icon="📦", layout="wide")
    init_auth_state()

    kind = render_sidebar()
    st.header(f"{ENTITY_LABELS[kind]} – CSV import & export")

    if not require_auth():
        return

    col_export, col_import = st.columns([1, 2])
    with col_export:
        render_export(kind)
    with col_import:
        render_import(kind)

    if IS_DEV:
        with st.expander("Debug"):
            st.json({"role": get_role(), "admin_access": has_admin_access(), "entity": kind})


if __name__ == "__main__":
    main()
