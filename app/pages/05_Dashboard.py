import streamlit as st

from core.models import ApiError
from services.config import asset_url
from services.dashboard import count_consultations
from ui.navigation import page_for
from ui.session import get_client, get_config, get_logger, open_page
from ui.theming import page_header, pill


def run():
    open_page("/app/dashboard", "Dashboard", "🏠")
    config = get_config()
    client = get_client()
    logger = get_logger()

    try:
        user = client.profile()
    except ApiError as e:
        logger.log_warning(f"Profile fetch failed: {e}")
        user = None

    greeting = f"Halo, {user.name or user.username}!" if user else "Halo!"
    page_header(greeting, config["app"].get("subtitle", ""))

    col1, col2 = st.columns([2, 1])
    with col1:
        with st.container(border=True):
            st.markdown("#### 🚗 Kendaraan Anda")
            if user:
                cols = st.columns(3)
                cols[0].metric("Seri Mobil", user.car_series or "-")
                cols[1].metric("Kode Mesin", user.engine_code or "-")
                cols[2].metric("Plat Nomor", user.plate_number or "-")
            else:
                st.caption("Profil tidak dapat dimuat.")
    with col2:
        with st.container(border=True):
            if user and user.profile_picture:
                st.image(asset_url(config["api"]["base_url"], user.profile_picture), width=96)
            elif user:
                pill(user.initials)
            if user:
                st.write(f"**{user.username}**  \n{user.email}")

    modules = config["modules"]
    counts = count_consultations(client, [m["consultation_base"] for m in modules.values()], logger)
    st.divider()
    cols = st.columns(len(modules) + 1)
    cols[0].metric("Total Konsultasi", sum(counts.values()))
    for col, settings in zip(cols[1:], modules.values()):
        col.metric(f"Konsultasi {settings['label']}", counts[settings["consultation_base"]])

    st.divider()
    st.markdown("### 🚀 Mulai Konsultasi")
    cols = st.columns(len(modules))
    for col, (name, settings) in zip(cols, modules.items()):
        with col:
            with st.container(border=True):
                st.markdown(f"#### {settings['label']}")
                st.page_link(page_for(f"/app/{name}/consultation"), label=f"Konsultasi {settings['label']}", icon="🔧")
                st.page_link(page_for(f"/app/{name}/history"), label="Lihat riwayat", icon="📜")


if __name__ == "__main__":
    run()
