from ui.history import render_history
from ui.session import open_page

ROUTE = "/app/engine/history"


def run():
    open_page(ROUTE, "Riwayat Engine", "📜")
    render_history("engine")


if __name__ == "__main__":
    run()
