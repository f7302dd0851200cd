import streamlit as st
from typing import Optional

from core.auth import LOGIN_ROUTE, LOGOUT_ROUTE, resolve_route
from services.api_client import ApiClient
from services.config import load_config
from services.logging_service import LoggingService, setup_logger
from ui.navigation import page_for, render_sidebar
from ui.theming import setup_page

TOKEN_KEY = "token"
LOGGED_OUT_KEY = "logged_out"


# --- Shared resources (satu instance per proses Streamlit) ---
@st.cache_resource
def get_config():
    return load_config()


@st.cache_resource
def get_logger():
    config = get_config()
    log_file = f"{config['logging']['dir']}/sipake.log"
    setup_logger(log_file=log_file, level=config["logging"]["level"])
    return LoggingService(log_file=log_file)


@st.cache_resource
def get_base_client():
    api = get_config()["api"]
    return ApiClient(api["base_url"], timeout=float(api["timeout"]))


# --- Token sesi ---
def get_token() -> Optional[str]:
    """Token dari session; pada load pertama jatuh ke cookie request."""
    token = st.session_state.get(TOKEN_KEY)
    if token:
        return token
    if st.session_state.get(LOGGED_OUT_KEY):
        return None
    cookie_name = get_config()["auth"]["cookie_name"]
    token = st.context.cookies.get(cookie_name)
    if token:
        st.session_state[TOKEN_KEY] = token
    return token


def set_token(token: str) -> None:
    st.session_state[TOKEN_KEY] = token
    st.session_state[LOGGED_OUT_KEY] = False


def clear_token() -> None:
    # Cookie request tidak bisa dihapus dari server Streamlit, jadi tandai logout
    st.session_state.pop(TOKEN_KEY, None)
    st.session_state[LOGGED_OUT_KEY] = True
    for key in [k for k in st.session_state.keys() if str(k).startswith("wizard_")]:
        del st.session_state[key]


def get_client() -> ApiClient:
    """ApiClient yang membawa token sesi saat ini."""
    return get_base_client().with_token(get_token())


def guard(route: str) -> Optional[str]:
    """Terapkan route guard untuk halaman `route`.

    Redirect (st.switch_page) jika akses ditolak; selain itu kembalikan token.
    """
    token = get_token()
    client = get_base_client()
    decision = resolve_route(route, token, verify=client.verified_role)
    if decision.clear_token:
        clear_token()
        get_logger().log_auth_event("logout" if route == LOGOUT_ROUTE else "session_rejected")
    if not decision.allowed:
        st.switch_page(page_for(decision.redirect or LOGIN_ROUTE))
    return get_token()


def open_page(route: str, title: str, icon: str = "🚗") -> Optional[str]:
    """Boilerplate halaman: page config, route guard, lalu sidebar."""
    setup_page(f"{title} · {get_config()['app']['name']}", icon)
    token = guard(route)
    render_sidebar(get_config()["app"]["name"], token)
    return token
