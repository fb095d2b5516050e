# app.py
from __future__ import annotations

from typing import Optional, Tuple, List
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from analytics import AUTO, DEFAULT_TOP_N, build_dashboard, items_frame, series_frame
from ingest import parse_upload
from logging_setup import configure_logging, get_logger
from model import DashboardBundle, ItemTally, ParseError, ParseReport, TimeBucket, TransactionRecord

log = get_logger("seller_dashboard.app")

INTERVAL_OPTIONS = {
    AUTO: "Auto",
    "day": "Daily",
    "week": "Weekly",
    "month": "Monthly",
    "year": "Yearly",
}
PARSE_ERROR_EMPTY_STATE = "Fix CSV errors to view data"
NO_DATA_EMPTY_STATE = "No data found for selected date range"
UNLABELED_ITEM = "(no item)"
SERIES_NAMES = {"total_profit": "Profit", "net_revenue": "Net Revenue"}


@st.cache_data(show_spinner=False)
def load_records(data: bytes) -> Tuple[List[TransactionRecord], ParseReport]:
    # streamlit reruns the script on every widget change, parse once per upload
    return parse_upload(data)


def _reset_upload() -> None:
    st.session_state["upload_gen"] = st.session_state.get("upload_gen", 0) + 1


def render_upload() -> Optional[Tuple[str, bytes]]:
    uploaded = st.file_uploader(
        "Upload Sales CSV File",
        type=["csv"],
        key=f"upload_{st.session_state.get('upload_gen', 0)}",
        help="Supported format: CSV with Date, ITEAMS, PAYMENT, GST, ITEM RATE, PROFIT, QUANTITY, RETURN / CANCEL",
    )
    if uploaded is None:
        return None
    return uploaded.name, uploaded.getvalue()


def render_controls():
    c1, c2, c3 = st.columns(3)
    with c1:
        start = st.date_input("Start Date", value=None, format="DD-MM-YYYY")
    with c2:
        end = st.date_input("End Date", value=None, format="DD-MM-YYYY")
    with c3:
        interval = st.selectbox(
            "Interval",
            options=list(INTERVAL_OPTIONS.keys()),
            format_func=lambda k: INTERVAL_OPTIONS[k],
        )
    return start, end, interval


def format_inr(amount: float) -> str:
    """Rupees with Indian digit grouping (12,34,567.5), at most 2 decimals."""
    sign = "-" if round(amount, 2) < 0 else ""
    whole, frac = f"{abs(amount):.2f}".split(".")
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])
    frac = frac.rstrip("0")
    return f"{sign}₹{grouped}.{frac}" if frac else f"{sign}₹{grouped}"


def render_summary(bundle: DashboardBundle) -> None:
    s = bundle.summary
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Orders", f"{s.order_count:,}")
    c2.metric("Returns / Cancellations", f"{s.returns_count:,}")
    c3.metric("Gross Profit", format_inr(s.gross_profit))
    c4.metric("Total Revenue (Excl. GST)", format_inr(s.gross_revenue))


def trend_figure(series: List[TimeBucket]) -> go.Figure:
    ts = series_frame(series)
    fig = px.line(
        ts,
        x="date",
        y=list(SERIES_NAMES),
        markers=True,
        labels={"value": "Amount", "date": "", "variable": ""},
    )
    fig.for_each_trace(
        lambda t: t.update(
            name=SERIES_NAMES[t.name],
            hovertemplate=f"%{{x|%b %d, %Y}}<br>{SERIES_NAMES[t.name]}: ₹%{{y:,.2f}}<extra></extra>",
        )
    )
    # range slider lets the user zoom into a sub-range of buckets
    fig.update_xaxes(
        tickvals=ts["date"],
        ticktext=ts["label"],
        tickangle=-45,
        rangeslider_visible=True,
    )
    fig.update_layout(legend=dict(orientation="h", yanchor="bottom", y=1.02))
    return fig


def items_display_frame(items: List[ItemTally]) -> pd.DataFrame:
    # no item column (None) and blank cells ("") both get a visible slice name
    df = items_frame(items)
    df["name"] = df["name"].fillna(UNLABELED_ITEM).replace("", UNLABELED_ITEM)
    return df


def render_charts(bundle: DashboardBundle) -> None:
    left, right = st.columns(2, gap="large")

    with left:
        st.subheader("📈 Profit & Revenue Over Time")
        st.plotly_chart(trend_figure(bundle.series), use_container_width=True)
        st.caption(f"Interval: {INTERVAL_OPTIONS[bundle.granularity]}")

    with right:
        st.subheader("🥇 Top-Selling Items")
        fig = px.pie(items_display_frame(bundle.top_items), names="name", values="value", hole=0.35)
        fig.update_traces(textinfo="value")
        st.plotly_chart(fig, use_container_width=True)

    with st.expander("Bucketed series"):
        st.dataframe(series_frame(bundle.series), use_container_width=True)


def main() -> None:
    configure_logging()
    st.set_page_config(page_title="Seller Dashboard", layout="wide")
    st.title("📊 Seller Dashboard")

    upload = render_upload()
    if upload is None:
        st.info("Upload a sales CSV export to get started.")
        return

    file_name, data = upload
    head_l, head_r = st.columns([0.8, 0.2])
    head_l.caption(f"Analyzing: `{file_name}`")
    head_r.button("Upload Different File", on_click=_reset_upload)

    try:
        records, report = load_records(data)
    except ParseError as e:
        log.error("CSV parse error in %s: %s", file_name, e)
        st.error(str(e))
        st.write(PARSE_ERROR_EMPTY_STATE)
        return

    st.caption(
        f"Rows: {report.total_rows} | Returns / cancellations: {report.returns_rows} | "
        f"Item column: `{report.item_column or 'none'}`"
    )

    start, end, interval = render_controls()
    bundle = build_dashboard(records, start=start, end=end, interval=interval, top_n=DEFAULT_TOP_N)

    if bundle.is_empty:
        st.write(NO_DATA_EMPTY_STATE)
        return

    render_summary(bundle)
    st.divider()
    render_charts(bundle)


if __name__ == "__main__":
    main()
