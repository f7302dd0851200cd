import streamlit as st

from core.models import ApiError, ValidationError
from core.validation import MIN_PASSWORD_LENGTH, validate_registration
from ui.navigation import page_for
from ui.session import get_base_client, get_logger, open_page
from ui.theming import page_header


def run():
    open_page("/auth/signup", "Daftar", "📝")
    page_header("Daftar Akun", "Buat akun untuk menyimpan riwayat konsultasi kendaraan Anda.")

    with st.form("register_form"):
        cols = st.columns(2)
        with cols[0]:
            username = st.text_input("Username")
            name = st.text_input("Nama Lengkap")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password", help=f"Minimal {MIN_PASSWORD_LENGTH} karakter")
        with cols[1]:
            phone = st.text_input("No. Telepon (opsional)")
            plate = st.text_input("Plat Nomor (opsional)")
            address = st.text_area("Alamat (opsional)")
        picture = st.file_uploader("Foto Profil (opsional)", type=["png", "jpg", "jpeg"])
        submitted = st.form_submit_button("Daftar", type="primary", width="stretch")

    if submitted:
        form = {
            "username": username,
            "name": name,
            "email": email,
            "password": password,
            "phoneNumber": phone,
            "plateNumber": plate,
            "address": address,
        }
        try:
            payload = validate_registration(form)
            upload = (picture.name, picture.getvalue(), picture.type) if picture else None
            get_base_client().register(payload, upload)
        except ValidationError as e:
            st.error(f"❌ {e}")
        except ApiError as e:
            st.error(f"❌ Registrasi gagal: {e.message}")
        else:
            get_logger().log_auth_event("register", payload["username"])
            st.session_state["pending_username"] = payload["username"]
            st.switch_page(page_for("/auth/verify"))

    st.page_link(page_for("/auth/login"), label="Sudah punya akun? Login", icon="🔑")


if __name__ == "__main__":
    run()
