import streamlit as st
from pathlib import Path

from core.certainty import certainty_percentage, certainty_value, likelihood_label
from core.models import ApiError
from core.search_filter import search_histories
from services.config import module_config
from services.history import HistoryService, format_date
from ui.components import show_image
from ui.session import get_client, get_config, get_logger
from ui.theming import certainty_badge, page_header


def render_history(module: str):
    """Riwayat konsultasi satu modul: tabel, statistik, dan export CSV."""
    config = get_config()
    settings = module_config(config, module)
    base_url = config["api"]["base_url"]
    page_header(f"Riwayat Konsultasi {settings['label']}", "Daftar hasil konsultasi yang pernah Anda lakukan.")

    service = HistoryService(get_client(), settings["consultation_base"], get_logger())
    try:
        histories = service.load_or_raise()
    except ApiError as e:
        get_logger().log_warning(f"History fetch failed for {module}: {e}")
        st.warning(f"⚠️ Riwayat tidak dapat dimuat: {e.message}")
        histories = []

    tab1, tab2, tab3 = st.tabs(["📜 Riwayat", "📊 Statistik", "📥 Export"])

    # ===== TAB 1: Riwayat =====
    with tab1:
        col1, col2, col3 = st.columns([2, 1, 1])
        with col1:
            query = st.text_input("Cari masalah", placeholder="Nama atau ID problem...")
        with col2:
            date_from = st.date_input("Dari tanggal", value=None)
        with col3:
            date_to = st.date_input("Sampai tanggal", value=None)

        results = search_histories(
            histories,
            query=query,
            date_from=date_from.isoformat() if date_from else None,
            date_to=date_to.isoformat() if date_to else None,
        )

        if not results:
            st.info("Belum ada riwayat konsultasi.")
        else:
            st.dataframe(service.to_dataframe(results), width="stretch", hide_index=True)

            st.divider()
            st.subheader("Detail")
            for i, history in enumerate(results, 1):
                problem = history.problem
                pct = certainty_value(history.status)
                title = f"{i}. {format_date(history.timestamp)} · {problem.name if problem else '-'}"
                with st.expander(title):
                    st.markdown(certainty_badge(pct, f"{certainty_percentage(history.status)} · {likelihood_label(pct)}"))
                    if problem:
                        show_image(base_url, problem.image)
                        if problem.description:
                            st.write(problem.description)
                        if problem.solution:
                            st.info(f"**Solusi:** {problem.solution}")

    # ===== TAB 2: Statistik =====
    with tab2:
        stats = service.get_statistics(histories)
        cols = st.columns(3)
        cols[0].metric("Total Konsultasi", stats["total_consultations"])
        cols[1].metric("Masalah Berbeda", stats["unique_problems"])
        avg = stats["average_certainty"]
        cols[2].metric("Rata-rata Keyakinan", f"{avg:.2f}%" if avg is not None else "N/A")

        if stats["top_problems"]:
            st.markdown("**Masalah Terbanyak**")
            for entry in stats["top_problems"]:
                st.write(f"- {entry['problem_name']} ({entry['problem_id']}): {entry['count']}x")
        if stats["first_consultation_timestamp"]:
            st.caption(f"Konsultasi pertama: {format_date(stats['first_consultation_timestamp'])} · "
                       f"terakhir: {format_date(stats['last_consultation_timestamp'])}")

    # ===== TAB 3: Export =====
    with tab3:
        if not histories:
            st.info("Tidak ada data untuk diexport.")
        elif st.button("📄 Buat CSV"):
            path = service.export_to_csv(histories)
            st.success(f"✅ CSV dibuat: `{path}`")
            st.download_button(
                "⬇️ Download CSV",
                data=Path(path).read_bytes(),
                file_name=Path(path).name,
                mime="text/csv",
            )
