import streamlit as st

from core.auth import decode_claims, home_for, role_of
from ui.navigation import page_for, render_sidebar
from ui.session import get_config, get_token
from ui.theming import setup_page

CONFIG = get_config()

setup_page(CONFIG["app"]["name"])

# Sesi yang masih valid langsung diarahkan ke halaman awal sesuai role
token = get_token()
claims = decode_claims(token)
if claims is not None:
    st.switch_page(page_for(home_for(role_of(claims))))

render_sidebar(CONFIG["app"]["name"], None)

# Konten halaman utama
st.title(f"🚗 {CONFIG['app']['name']}")
st.markdown(f"### {CONFIG['app'].get('subtitle', '')}")

col1, col2 = st.columns([2, 1])

with col1:
    st.markdown("""
    **Si Pak-E** membantu pemilik BMW E36 mendiagnosa masalah pada **mesin** dan **suspensi**
    kendaraan melalui tanya-jawab gejala.

    #### 🎯 Cara Kerja:
    1. **Login** atau **daftar** akun baru
    2. Pilih modul **Engine** atau **Suspension**
    3. Jawab setiap pertanyaan gejala dengan **Ya** atau **Tidak**
    4. Dapatkan **daftar kemungkinan masalah** beserta tingkat keyakinan dan solusinya
    """)

with col2:
    with st.container(border=True):
        st.markdown("#### Mulai")
        st.page_link(page_for("/auth/login"), label="Login", icon="🔑")
        st.page_link(page_for("/auth/signup"), label="Daftar akun baru", icon="📝")

st.divider()

feature_cols = st.columns(3)

with feature_cols[0]:
    st.markdown("#### 🔧 Konsultasi")
    st.markdown("Tanya-jawab gejala untuk modul Engine dan Suspension.")

with feature_cols[1]:
    st.markdown("#### 📜 Riwayat")
    st.markdown("Lihat kembali hasil konsultasi sebelumnya dan export ke CSV.")

with feature_cols[2]:
    st.markdown("#### ⚙️ Knowledge Base")
    st.markdown("Expert mengelola problem, gejala, dan rules beserta CF pakar.")

st.divider()
st.caption("Tingkat keyakinan (Certainty Factor) dihitung oleh server pakar Si Pak-E.")
