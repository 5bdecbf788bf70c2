import logging
import time
from contextlib import contextmanager

import pandas as pd
import streamlit as st

from trackdash.config import DEBOUNCE_MS, DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, POPULARITY_MAX, POPULARITY_MIN, configure_logging
from trackdash.data import load_dashboard_data
from trackdash.debounce import Debouncer
from trackdash.errors import DatasetError
from trackdash.export import export_visible_rows
from trackdash.filters import ALL_GENRES, FilterCriteria, FilterEngine
from trackdash.notify import BaseNotifier, Severity
from trackdash.summary import compute_summary
from trackdash.table import TABLE_COLUMNS, display_frame, paginate, sort_rows

configure_logging()
logger = logging.getLogger("trackdash.app")

_TOAST_ICONS = {"success": "✅", "info": "ℹ️", "warning": "⚠️", "error": "🚨"}


class StreamlitNotifier(BaseNotifier):
    def notify(self, severity: Severity, message: str) -> None:
        st.toast(message, icon=_TOAST_ICONS.get(severity))
        if severity == "error":
            st.error(message)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 18px 20px;border-radius: 12px;margin-bottom: 12px;
                      background: linear-gradient(90deg, #22c55e, #059669);color: #ffffff;}
        .app-top-bar .page-title {font-size: 1.8rem;font-weight: 700;}
        .app-top-bar .subtitle {color: #dcfce7;font-size: 0.95rem;margin-top: 2px;}
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


def format_filter_summary(criteria: FilterCriteria) -> str:
    chips = [
        f"Search: {criteria.search}" if criteria.search else "Search: none",
        f"Genre: {criteria.genre or '(no genre)'}" if criteria.genre is not None else "Genre: All",
        f"Popularity: {criteria.popularity_min:g}–{criteria.popularity_max:g}",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header():
    inject_base_styles()
    st.markdown(
        "<div class='app-top-bar'><div class='page-title'>Spotify Dashboard 🎧</div>"
        "<div class='subtitle'>Search, sort & filter songs</div></div>",
        unsafe_allow_html=True,
    )


# ---------- Session state ----------
def search_debouncer() -> Debouncer:
    if "search_debouncer" not in st.session_state:
        st.session_state["search_debouncer"] = Debouncer(interval_ms=DEBOUNCE_MS, initial="")
    return st.session_state["search_debouncer"]


def filter_engine() -> FilterEngine:
    if "filter_engine" not in st.session_state:
        st.session_state["filter_engine"] = FilterEngine()
    return st.session_state["filter_engine"]


def on_search_change():
    search_debouncer().push(st.session_state.get("search_input", ""))


FILTER_DEFAULTS = {
    "search_input": "",
    "genre_select": ALL_GENRES,
    "popularity_min": POPULARITY_MIN,
    "popularity_max": POPULARITY_MAX,
}


def init_filter_state():
    for key, value in FILTER_DEFAULTS.items():
        st.session_state.setdefault(key, value)


def reset_filters():
    search_debouncer().cancel()
    st.session_state["search_debouncer"] = Debouncer(interval_ms=DEBOUNCE_MS, initial="")
    st.session_state.update(FILTER_DEFAULTS)
    st.session_state.pop("export", None)


def settled_search() -> str:
    debouncer = search_debouncer()
    if debouncer.pending:
        # A newer keystroke interrupts this run and re-arms the debouncer.
        with st.spinner("Searching…"):
            time.sleep(debouncer.interval_ms / 1000)
        debouncer.flush()
    return debouncer.settled or ""


# ---------- UI setup ----------
st.set_page_config(page_title="Spotify Dashboard", page_icon="🎧", layout="wide")
render_page_header()
notifier = StreamlitNotifier()

try:
    with st.spinner("Loading tracks…"):
        data_ctx = load_dashboard_data()
except DatasetError as exc:
    logger.exception("dataset load failed")
    st.error(f"Failed to load dataset: {exc}")
    st.stop()

rows: pd.DataFrame = data_ctx["rows"]
genres = data_ctx.get("genres", [])

# ----- Filter bar -----
init_filter_state()
with card("Filters"):
    c1, c2, c3, c4, c5 = st.columns([4, 3, 2, 2, 1])
    c1.text_input("Search Track / Artist", key="search_input", on_change=on_search_change)
    genre_choice = c2.selectbox(
        "Genre", options=[ALL_GENRES] + genres, key="genre_select", format_func=lambda g: g or "(no genre)"
    )
    popularity_min = c3.number_input("Min Popularity", step=1.0, key="popularity_min")
    popularity_max = c4.number_input("Max Popularity", step=1.0, key="popularity_max")
    c5.button("Reset", on_click=reset_filters)

criteria = FilterCriteria(
    search=settled_search(),
    genre=None if genre_choice == ALL_GENRES else genre_choice,
    popularity_min=float(popularity_min),
    popularity_max=float(popularity_max),
)
visible = filter_engine().visible(rows, criteria)
ctx = {"filters": criteria, "visible_rows": visible, "total_rows": len(rows), "visible_count": len(visible)}

st.markdown(f"<div class='chip-row'>{format_filter_summary(criteria)}</div>", unsafe_allow_html=True)
if criteria.search:
    st.caption(f"🔍 Searching for: **{criteria.search}**")


def render_table(visible_rows: pd.DataFrame):
    sort_labels = {header: field for field, header in TABLE_COLUMNS.items()}
    t1, t2, t3, t4 = st.columns([3, 2, 2, 2])
    sort_label = t1.selectbox("Sort by", options=list(sort_labels), index=list(sort_labels).index("Popularity"))
    descending = t2.selectbox("Order", ["Descending", "Ascending"], index=0) == "Descending"
    page_size = t3.selectbox("Rows per page", PAGE_SIZE_OPTIONS, index=PAGE_SIZE_OPTIONS.index(DEFAULT_PAGE_SIZE))

    ordered = sort_rows(visible_rows, by=sort_labels[sort_label], descending=descending)
    page_count = max(1, -(-len(ordered) // page_size))
    page_no = t4.number_input("Page", min_value=1, max_value=page_count, value=1, step=1)
    page = paginate(ordered, page=int(page_no) - 1, page_size=page_size)

    st.dataframe(display_frame(page.rows), use_container_width=True, hide_index=True)
    st.caption(f"Page {page.page + 1} of {page.page_count} · {page.total_rows:,} of {len(rows):,} tracks")


def render_export(visible_rows: pd.DataFrame):
    if st.button("Export CSV"):
        st.session_state["export"] = (criteria, export_visible_rows(visible_rows, notifier))
    exported_for, export_file = st.session_state.get("export", (None, None))
    if export_file is not None and exported_for == criteria:
        st.download_button(
            f"Download {export_file.filename}",
            data=export_file.content,
            file_name=export_file.filename,
            mime=export_file.mime,
        )


tab_table, tab_summary = st.tabs(["Tracks", "Summary"])
with tab_table:
    with card("Tracks"):
        if visible.empty:
            st.info("No tracks match the current filters.")
        else:
            render_table(visible)
        render_export(visible)

with tab_summary:
    summary = compute_summary(criteria, ctx)
    kpis = summary["kpis"]
    k = st.columns(4)
    k[0].metric("Visible tracks", f"{kpis['visible_tracks']:,}")
    k[1].metric("Total tracks", f"{kpis['total_tracks']:,}")
    k[2].metric("Genres", f"{kpis['visible_genres']:,}")
    k[3].metric("Avg popularity", f"{kpis['avg_popularity']:.1f}" if kpis["avg_popularity"] is not None else "N/A")
    charts = summary["charts"]
    if charts:
        s1, s2 = st.columns(2)
        with s1:
            with card("Popularity distribution"):
                st.vega_lite_chart(charts["popularity_histogram"], use_container_width=True)
        with s2:
            with card("Top genres"):
                st.vega_lite_chart(charts["top_genres"], use_container_width=True)
