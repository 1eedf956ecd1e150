import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from edutrend.charts import projection_chart
from edutrend.data import format_display_table, format_rate, format_selection_summary, load_dashboard_data
from edutrend.filters import HORIZON_MAX, HORIZON_MIN, LEVELS
from edutrend.metrics_debug import compute_debug
from edutrend.pipeline import STATUS_DEGENERATE, STATUS_IDLE, STATUS_NO_DATA, STATUS_READY
from edutrend.session import SessionController


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{summary_html}</div>", unsafe_allow_html=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Aplikasi Analisis dan Prediksi", layout="wide")
inject_base_styles()
st.title("Aplikasi Analisis dan Prediksi")
st.caption("Tingkat penyelesaian pendidikan per provinsi dengan proyeksi tren linear.")

data_ctx = load_dashboard_data()
error = data_ctx.get("error")
if error is not None:
    st.error(error.message)
    st.stop()

dataset: pd.DataFrame = data_ctx["dataset"]
regions = data_ctx.get("regions", [])
malformed_rows = data_ctx.get("malformed_rows", [])
if malformed_rows:
    st.warning(f"{len(malformed_rows)} baris data tidak valid diabaikan. Lihat halaman Data Quality.")

# ----- Sidebar: navigation + selection -----
with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Proyeksi", "Data Quality"], index=0)

    st.markdown("---")
    st.markdown("### Filter")
    region = st.selectbox("Provinsi", options=[""] + regions, format_func=lambda v: v or "Pilih Provinsi")
    level = st.selectbox("Jenjang Pendidikan", options=[""] + list(LEVELS), format_func=lambda v: v or "Pilih Jenjang")
    horizon = st.selectbox("Prediksi Tahun", options=list(range(HORIZON_MIN, HORIZON_MAX + 1)), index=0)

if "controller" not in st.session_state:
    st.session_state["controller"] = SessionController()
controller: SessionController = st.session_state["controller"]
outcome = controller.update(dataset=dataset, region=region, level=level, horizon=horizon)


# ----- Page renderers -----

def render_projection_page():
    summary_html = format_selection_summary(region, level, horizon)
    export_df = outcome.display if outcome.status == STATUS_READY else None
    render_page_header("Proyeksi Tingkat Penyelesaian", "Home / Proyeksi", summary_html, export_df=export_df, export_name="proyeksi.csv")

    if outcome.status == STATUS_IDLE:
        st.info(outcome.message)
        return
    if outcome.status == STATUS_NO_DATA:
        st.info(outcome.message)
        return
    if outcome.status == STATUS_DEGENERATE:
        st.warning(outcome.message)
        with card("Data historis"):
            st.dataframe(format_display_table(outcome.display), hide_index=True, use_container_width=True)
        return

    if outcome.duplicate_years:
        years = ", ".join(str(y) for y in outcome.duplicate_years)
        st.warning(f"Tahun berikut muncul lebih dari sekali dan semuanya dipakai dalam perhitungan tren: {years}")

    cols = st.columns(3)
    last_hist = outcome.series.iloc[-1]
    last_pred = outcome.predictions.iloc[-1]
    cols[0].metric(f"Aktual {int(last_hist['year'])}", format_rate(last_hist["completion_rate"]))
    cols[1].metric(
        f"Prediksi {int(last_pred['year'])}",
        format_rate(last_pred["value"]),
        delta=f"{last_pred['value'] - last_hist['completion_rate']:+.2f}",
    )
    cols[2].metric("Slope / tahun", format_rate(outcome.model.slope, 3))

    left, right = st.columns([3, 2])
    with left:
        with card("Tingkat Penyelesaian"):
            st.altair_chart(projection_chart(outcome.display), use_container_width=True)
    with right:
        with card("Tabel"):
            st.dataframe(format_display_table(outcome.display), hide_index=True, use_container_width=True)


def render_debug_page():
    summary_html = format_selection_summary(region, level, horizon)
    render_page_header("Data Quality", "Home / Data Quality", summary_html, export_df=dataset, export_name="dataset.csv")
    payload = compute_debug(controller.state.selection, data_ctx)
    with card("Data Quality"):
        st.markdown(f"**Sumber**: `{payload['source']}`")
        st.markdown("**Row counts**")
        st.write(payload["row_counts"])
        if payload["malformed_rows"]:
            st.markdown("**Baris yang diabaikan**")
            st.dataframe(pd.DataFrame(payload["malformed_rows"]), hide_index=True, use_container_width=True)
        st.markdown("**Cakupan tahun per provinsi / jenjang**")
        st.dataframe(pd.DataFrame(payload["year_coverage"]), hide_index=True, use_container_width=True)
    st.caption("Perbarui data.csv untuk memperpanjang deret waktu; dashboard memuat ulang otomatis.")


if nav_choice == "Proyeksi":
    render_projection_page()
else:
    render_debug_page()
