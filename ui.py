#!/usr/bin/env python3
"""
Streamlit UI for event registration and PDF exports
"""

import os
import tempfile
import time
import traceback

import streamlit as st

import pandas as pd

from config import (
    ALLOWED_PHOTO_TYPES,
    ASSET_ROOT,
    EVENT_NAME,
    ORGANIZATION_NAME,
    REGISTRATIONS_CSV,
)
from registry import RegistrationStore

# Startup timing (logged to stdout for Streamlit Cloud logs)
_UI_T0 = time.perf_counter()
def _ui_log(msg: str) -> None:
    print(f"[ui] +{time.perf_counter() - _UI_T0:.3f}s {msg}", flush=True)

_ui_log("ui.py start")

st.set_page_config(
    page_title=f"{EVENT_NAME} Registration",
    page_icon="📝",
    layout="centered",
)

st.markdown(
    f"""
<div style="margin-top: 0.25rem; margin-bottom: 0.25rem;">
  <div style="font-size: 1.8rem; font-weight: 750; line-height: 1.15;">
    {EVENT_NAME}
  </div>
  <div style="font-size: 1.05rem; opacity: 0.8; margin-top: 0.2rem;">
    {ORGANIZATION_NAME} · Registration
  </div>
</div>
""",
    unsafe_allow_html=True,
)
_ui_log("rendered header")

store = RegistrationStore(REGISTRATIONS_CSV, ASSET_ROOT)

# Initialize session state
if "exports" not in st.session_state:
    # {"table": ExportResult, "cards": ExportResult}
    st.session_state.exports = {}
if "_last_export_error" not in st.session_state:
    st.session_state._last_export_error = None


def _clear_exports():
    st.session_state.exports = {}


# --- Registration form ---
st.subheader("Register")
with st.form("registration_form", clear_on_submit=True):
    c1, c2 = st.columns([1, 1])
    with c1:
        name = st.text_input("Name")
        cluster = st.text_input("Cluster")
    with c2:
        unit = st.text_input("Unit")
        designations = st.text_input("Designations", help='Comma separated, e.g. "President, Secretary"')
    photo = st.file_uploader("Photo (optional)", type=ALLOWED_PHOTO_TYPES)
    submitted = st.form_submit_button("Submit registration", type="primary")
if submitted:
    try:
        record = store.register(
            name,
            cluster,
            unit,
            designations,
            photo_bytes=photo.getvalue() if photo is not None else None,
            photo_filename=photo.name if photo is not None else None,
        )
        _clear_exports()
        st.success(f"Registration successful: **{record.name}**")
    except ValueError as e:
        st.warning(str(e))
    except OSError as e:
        st.error(f"Server error. Please try again later. ({e})")
_ui_log("rendered registration form")

st.markdown("---")

# --- Admin ---
st.subheader("Registrations")
try:
    records = store.list_records()
except (ValueError, OSError) as e:
    records = []
    st.error(f"Could not read registrations: {e}")

if records:
    df = pd.DataFrame(
        [
            {
                "Name": r.name,
                "Cluster": r.cluster,
                "Unit": r.unit,
                "Designations": r.designations_text,
                "Photo": "✓" if r.photo_path else "",
                "Registered": r.created_at.strftime("%Y-%m-%d %H:%M"),
                "ID": r.id,
            }
            for r in records
        ]
    )
    df.index = range(1, len(df) + 1)
    st.markdown(f"**Total registrations:** {len(records)}")
    st.dataframe(df)

    labels = {r.id: f"{r.name} — {r.cluster} / {r.unit}" for r in records}
    with st.expander("Edit or delete a registration", expanded=False):
        selected_id = st.selectbox("Registration", options=list(labels), format_func=lambda i: labels[i])
        selected = next(r for r in records if r.id == selected_id)
        with st.form("edit_form", clear_on_submit=False):
            e1, e2 = st.columns([1, 1])
            with e1:
                new_name = st.text_input("Name", value=selected.name)
                new_cluster = st.text_input("Cluster", value=selected.cluster)
            with e2:
                new_unit = st.text_input("Unit", value=selected.unit)
                new_designations = st.text_input("Designations", value=selected.designations_text)
            save = st.form_submit_button("Save changes")
        if save:
            try:
                store.update(
                    selected_id,
                    name=new_name,
                    cluster=new_cluster,
                    unit=new_unit,
                    designations=new_designations,
                )
                _clear_exports()
                st.success("Registration updated")
                st.rerun()
            except ValueError as e:
                st.warning(str(e))
        if st.button("🗑️ Delete registration"):
            store.delete(selected_id)
            _clear_exports()
            st.success("Registration deleted")
            st.rerun()
else:
    st.info("No registrations yet.")

with st.expander("Import from file (Excel/CSV)", expanded=False):
    st.caption("Columns are matched by name: Name, Cluster, Unit, Designations (optional), Photo (optional).")
    with st.form("import_form", clear_on_submit=True):
        data_file = st.file_uploader("Upload data (Excel or CSV)", type=["csv", "xlsx"])
        load_uploaded = st.form_submit_button("📥 Import")
    if load_uploaded:
        if data_file is None:
            st.warning("Please upload a file first.")
        else:
            tmp_path = None
            try:
                # Write to a secure temp file (ignore user-provided filename)
                suffix = ".xlsx" if str(data_file.name).lower().endswith(".xlsx") else ".csv"
                with tempfile.NamedTemporaryFile(prefix="registrations_", suffix=suffix, delete=False) as tmp:
                    tmp.write(data_file.getbuffer())
                    tmp_path = tmp.name
                from data_loaders import load_registrations_dataframe, records_from_dataframe

                imported = load_registrations_dataframe(tmp_path)
                count = store.add_many(records_from_dataframe(imported))
                stats = imported.attrs.get("load_stats", {})
                _clear_exports()
                st.success(
                    f"Imported **{count}** registration(s) from **{data_file.name}** "
                    f"(source rows: {stats.get('source_rows')}, "
                    f"skipped missing fields: {stats.get('skipped_missing_fields', 0)})."
                )
            except (ValueError, ImportError, OSError) as e:
                st.error(f"Error reading {data_file.name}: {e}")
            finally:
                if tmp_path and os.path.exists(tmp_path):
                    os.remove(tmp_path)

st.markdown("---")

# --- Exports ---
st.subheader("Exports")
st.caption("PDFs are built in memory from the current registrations.")
col1, col2 = st.columns([1, 1])
with col1:
    make_table = st.button("📄 Registration table (A4)")
with col2:
    make_cards = st.button("🪪 ID cards (A3, 25 per page)")

if make_table or make_cards:
    # Import heavy rendering code only when needed (improves Streamlit Cloud startup)
    from exports import ExportError, export_idcards_pdf, export_registrations_pdf

    key, exporter = ("table", export_registrations_pdf) if make_table else ("cards", export_idcards_pdf)
    st.session_state._last_export_error = None
    with st.spinner("Generating PDF..."):
        try:
            st.session_state.exports[key] = exporter(store.list_records, asset_root=ASSET_ROOT)
        except ExportError:
            st.session_state.exports.pop(key, None)
            st.session_state._last_export_error = traceback.format_exc()
            st.error("Error generating PDF")

for key, label in (("table", "⬇️ Download registrations.pdf"), ("cards", "⬇️ Download idcards.pdf")):
    result = st.session_state.exports.get(key)
    if result is not None:
        st.download_button(
            label,
            data=result.content,
            file_name=result.filename,
            mime=result.mimetype,
            key=f"dl_{key}",
        )

if st.session_state._last_export_error:
    with st.expander("Show export error details", expanded=False):
        st.code(st.session_state._last_export_error)

st.markdown("---")
