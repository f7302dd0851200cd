import streamlit as st

from core.auth import LOGIN_ROUTE, decode_claims, home_for, needs_verification, role_of
from core.models import ApiError, ValidationError
from core.validation import validate_login
from ui.navigation import page_for
from ui.session import get_base_client, get_logger, open_page, set_token
from ui.theming import page_header


def run():
    open_page(LOGIN_ROUTE, "Login", "🔑")
    page_header("Login", "Masuk untuk memulai konsultasi kendaraan Anda.")

    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)

    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary", width="stretch")

    if submitted:
        logger = get_logger()
        try:
            credentials = validate_login(username, password)
            token, user = get_base_client().login(**credentials)
        except ValidationError as e:
            st.error(f"❌ {e}")
        except ApiError as e:
            logger.log_auth_event("login_failed", username)
            if needs_verification(e):
                st.session_state["pending_username"] = username.strip()
                st.switch_page(page_for("/auth/verify"))
            st.error(f"❌ Login gagal: {e.message}")
        else:
            set_token(token)
            logger.log_auth_event("login", credentials["username"])
            role = user.role if user else role_of(decode_claims(token))
            st.switch_page(page_for(home_for(role)))

    st.page_link(page_for("/auth/signup"), label="Belum punya akun? Daftar di sini", icon="📝")


if __name__ == "__main__":
    run()
