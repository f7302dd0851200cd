import streamlit as st

from core.models import ApiError, ValidationError
from core.validation import validate_verification
from ui.navigation import page_for
from ui.session import get_base_client, get_logger, open_page
from ui.theming import page_header


def run():
    open_page("/auth/verify", "Verifikasi Email", "✉️")
    page_header("Verifikasi Email", "Masukkan kode verifikasi yang telah dikirim ke email Anda.")

    with st.form("verify_form"):
        username = st.text_input("Username", value=st.session_state.get("pending_username", ""))
        code = st.text_input("Kode Verifikasi", max_chars=6, placeholder="6 digit")
        submitted = st.form_submit_button("Verifikasi", type="primary", width="stretch")

    if submitted:
        try:
            payload = validate_verification(username, code)
            get_base_client().verify(**payload)
        except ValidationError as e:
            st.error(f"❌ {e}")
        except ApiError as e:
            st.error(f"❌ Verifikasi gagal: {e.message}")
        else:
            get_logger().log_auth_event("verify", payload["username"])
            st.session_state.pop("pending_username", None)
            st.session_state["flash"] = "✅ Email berhasil diverifikasi. Silakan login."
            st.switch_page(page_for("/auth/login"))

    st.page_link(page_for("/auth/login"), label="Sudah verifikasi? Login", icon="🔑")


if __name__ == "__main__":
    run()
