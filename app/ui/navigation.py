import streamlit as st
from typing import List, Optional, Tuple

from core.auth import ADMIN_ROLES, decode_claims, role_of
from core.models import Role

# Route logis -> file halaman Streamlit (relatif ke main.py)
ROUTES = {
    "/": "main.py",
    "/auth/login": "pages/01_Login.py",
    "/auth/signup": "pages/02_Register.py",
    "/auth/verify": "pages/03_Verify.py",
    "/auth/logout": "pages/04_Logout.py",
    "/app/dashboard": "pages/05_Dashboard.py",
    "/app/engine/consultation": "pages/06_Engine_Consultation.py",
    "/app/engine/history": "pages/07_Engine_History.py",
    "/app/suspension/consultation": "pages/08_Suspension_Consultation.py",
    "/app/suspension/history": "pages/09_Suspension_History.py",
    "/admin": "pages/10_Admin_Dashboard.py",
    "/admin/engine/problems": "pages/11_Engine_Problems.py",
    "/admin/engine/symptoms": "pages/12_Engine_Symptoms.py",
    "/admin/engine/rules": "pages/13_Engine_Rules.py",
    "/admin/suspension/problems": "pages/14_Suspension_Problems.py",
    "/admin/suspension/symptoms": "pages/15_Suspension_Symptoms.py",
    "/admin/suspension/rules": "pages/16_Suspension_Rules.py",
    "/admin/users": "pages/17_Users.py",
}

USER_MENU: List[Tuple[str, str, str]] = [
    ("/app/dashboard", "Dashboard", "🏠"),
    ("/app/engine/consultation", "Konsultasi Engine", "🔧"),
    ("/app/engine/history", "Riwayat Engine", "📜"),
    ("/app/suspension/consultation", "Konsultasi Suspension", "🛞"),
    ("/app/suspension/history", "Riwayat Suspension", "📜"),
]

ADMIN_MENU: List[Tuple[str, str, str]] = [
    ("/admin", "Dashboard Admin", "📊"),
    ("/admin/engine/problems", "Engine: Problems", "⚙️"),
    ("/admin/engine/symptoms", "Engine: Symptoms", "⚙️"),
    ("/admin/engine/rules", "Engine: Rules", "⚙️"),
    ("/admin/suspension/problems", "Suspension: Problems", "🛞"),
    ("/admin/suspension/symptoms", "Suspension: Symptoms", "🛞"),
    ("/admin/suspension/rules", "Suspension: Rules", "🛞"),
]


def page_for(route: str) -> str:
    """File halaman untuk route; route tak dikenal jatuh ke halaman login."""
    return ROUTES.get(route, ROUTES["/auth/login"])


def menu_for(role: Optional[Role]) -> List[Tuple[str, str, str]]:
    """Menu sidebar sesuai role. Users hanya untuk SUPER_ADMIN."""
    if role not in ADMIN_ROLES:
        return USER_MENU
    menu = list(ADMIN_MENU)
    if role == Role.SUPER_ADMIN:
        menu.append(("/admin/users", "Users", "👥"))
    return menu


def render_sidebar(app_name: str, token: Optional[str]) -> None:
    """Sidebar navigasi manual (navigasi bawaan Streamlit disembunyikan)."""
    with st.sidebar:
        st.title(f"🚗 {app_name}")
        if not token:
            st.page_link(page_for("/auth/login"), label="Login", icon="🔑")
            st.page_link(page_for("/auth/signup"), label="Daftar", icon="📝")
            return
        role = role_of(decode_claims(token))
        st.caption(f"Role: {role.label if role else 'User'}")
        for route, label, icon in menu_for(role):
            st.page_link(page_for(route), label=label, icon=icon)
        st.divider()
        st.page_link(page_for("/auth/logout"), label="Logout", icon="🚪")
