import streamlit as st
from typing import Callable, List, Optional

from core.certainty import certainty_value, likelihood_label
from core.models import ApiError, Page, ProblemMatch, Symptom
from services.config import asset_url
from ui.theming import certainty_badge


def search_box(key: str, placeholder: str = "Cari...") -> str:
    """Input pencarian; halaman di-reset ke 1 setiap kata kunci berubah."""
    query = st.text_input("Cari", placeholder=placeholder, key=f"{key}_search", label_visibility="collapsed")
    if st.session_state.get(f"{key}_last_search") != query:
        st.session_state[f"{key}_last_search"] = query
        st.session_state[f"{key}_page"] = 1
    return query


def current_page(key: str) -> int:
    return st.session_state.get(f"{key}_page", 1)


def pagination_controls(key: str, page: Page):
    """Tombol Previous/Next; Previous mati di halaman 1, Next mati di halaman terakhir."""
    cols = st.columns([1, 2, 1])
    with cols[0]:
        if st.button("← Previous", key=f"{key}_prev", disabled=not page.has_previous, width="stretch"):
            st.session_state[f"{key}_page"] = page.page - 1
            st.rerun()
    with cols[1]:
        st.markdown(
            f"<p style='text-align:center'>Halaman {page.page} dari {page.total_pages}</p>",
            unsafe_allow_html=True,
        )
    with cols[2]:
        if st.button("Next →", key=f"{key}_next", disabled=not page.has_next, width="stretch"):
            st.session_state[f"{key}_page"] = page.page + 1
            st.rerun()


@st.dialog("Konfirmasi Hapus")
def confirm_delete(label: str, on_confirm: Callable[[], object]):
    st.write(f"Yakin ingin menghapus **{label}**? Tindakan ini tidak dapat dibatalkan.")
    cols = st.columns(2)
    with cols[0]:
        if st.button("Hapus", type="primary", width="stretch"):
            try:
                on_confirm()
            except ApiError as e:
                st.error(f"❌ Gagal menghapus: {e.message}")
                return
            st.session_state["flash"] = f"✅ '{label}' berhasil dihapus."
            st.rerun()
    with cols[1]:
        if st.button("Batal", width="stretch"):
            st.rerun()


def flash_message():
    """Tampilkan pesan sukses yang disimpan sebelum st.rerun()."""
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)


def show_image(base_url: str, path: Optional[str], width: int = 240):
    if path:
        st.image(asset_url(base_url, path), width=width)


def symptom_card(symptom: Symptom, number: int, base_url: str):
    st.caption(f"Pertanyaan #{number}")
    st.markdown(f"### {symptom.prompt}")
    if symptom.question and symptom.name != symptom.question:
        st.caption(symptom.name)
    show_image(base_url, symptom.image, width=320)


def match_list(matches: List[ProblemMatch], base_url: str):
    """Daftar kandidat masalah sesuai urutan dari server."""
    for rank, match in enumerate(matches, 1):
        problem = match.problem
        value = certainty_value(match.percentage)
        if value is None:
            value = match.certainty * 100
        pct = match.percentage or f"{value:.2f}%"
        label = match.likelihood or likelihood_label(value)
        with st.container(border=True):
            cols = st.columns([3, 1])
            with cols[0]:
                st.markdown(f"**#{rank} {problem.name}**")
                st.markdown(certainty_badge(value, f"{pct} · {label}"))
                if problem.description:
                    st.write(problem.description)
                if problem.solution:
                    st.info(f"**Solusi:** {problem.solution}")
            with cols[1]:
                show_image(base_url, problem.image, width=160)
