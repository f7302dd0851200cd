import streamlit as st

from core.certainty import badge_color
from core.validation import cf_band

PRIMARY = "var(--primary-color, #1c69d4)"  # BMW blue fallback
MUTED = "#64748b"  # slate-500

CF_BAND_COLORS = {
    "high": "green",
    "medium": "blue",
    "low": "orange",
    "very-low": "red",
}


def setup_page(title: str, icon: str = "🚗"):
    st.set_page_config(page_title=title, page_icon=icon, layout="wide", initial_sidebar_state="expanded")


def page_header(title: str, subtitle: str | None = None):
    st.markdown(f"<h2 style='margin-bottom:0.2rem'>{title}</h2>", unsafe_allow_html=True)
    if subtitle:
        st.markdown(f"<p style='color:{MUTED};margin-top:0'>{subtitle}</p>", unsafe_allow_html=True)


def pill(text: str, color: str = "#1c69d4"):
    st.markdown(
        f"""
        <span style="
          padding:4px 10px;border-radius:9999px;
          background:{color}1f;color:{color};
          font-size:0.85rem;">{text}</span>
        """,
        unsafe_allow_html=True
    )


def cf_chip(cf: float) -> str:
    """Markdown chip untuk nilai CF pakar."""
    return f":{CF_BAND_COLORS[cf_band(cf)]}-badge[CF {cf:.2f}]"


def certainty_badge(percentage: float | None, text: str) -> str:
    return f":{badge_color(percentage)}-badge[{text}]"
