from core.auth import LOGOUT_ROUTE
from ui.session import open_page


def run():
    # guard() menghapus token lalu redirect ke halaman login
    open_page(LOGOUT_ROUTE, "Logout")


if __name__ == "__main__":
    run()
