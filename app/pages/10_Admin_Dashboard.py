import streamlit as st

from services.dashboard import load_admin_stats
from ui.navigation import page_for
from ui.session import get_client, get_config, get_logger, open_page
from ui.theming import page_header


def run():
    open_page("/admin", "Dashboard Admin", "📊")
    page_header("Dashboard Admin", "Ringkasan pengguna dan konsultasi.")

    stats, error = load_admin_stats(get_client(), get_logger())
    if error:
        st.warning(f"⚠️ Statistik tidak dapat dimuat: {error}")

    cols = st.columns(4)
    cols[0].metric("Total Users", stats.users_total)
    cols[1].metric("Total Konsultasi", stats.consultations_total)
    cols[2].metric("Hari Ini", stats.consultations_today)
    cols[3].metric("Minggu Ini", stats.consultations_this_week)

    modules = get_config()["modules"]
    col1, col2 = st.columns(2)
    with col1:
        with st.container(border=True):
            st.markdown("#### Konsultasi per Modul")
            for name, settings in modules.items():
                st.write(f"{settings['label']}: **{stats.by_module.get(name, 0)}** konsultasi")
                st.progress(stats.module_share(name))
    with col2:
        with st.container(border=True):
            st.markdown("#### Masalah Terbanyak")
            if not stats.top_problems:
                st.caption("Belum ada data.")
            for i, problem in enumerate(stats.top_problems, 1):
                st.write(f"{i}. `{problem['problem_id']}`: {problem['count']}x")

    with st.expander("📝 Log Aktivitas Front-end"):
        activity = get_logger().get_statistics()
        st.caption(f"File log: `{activity['log_file']}` ({activity['log_file_size']} bytes)")
        st.write(f"Total aksi tercatat: **{activity['total_actions']}**")
        for entry in activity["top_actions"]:
            st.write(f"- `{entry['action']}`: {entry['count']}x")
        if st.button("Reset statistik"):
            get_logger().clear_statistics()
            st.rerun()

    st.divider()
    st.markdown("### ⚡ Aksi Cepat")
    cols = st.columns(len(modules))
    for col, (name, settings) in zip(cols, modules.items()):
        with col:
            for kind in ("problems", "symptoms", "rules"):
                st.page_link(page_for(f"/admin/{name}/{kind}"), label=f"Kelola {settings['label']} {kind.title()}")


if __name__ == "__main__":
    run()
