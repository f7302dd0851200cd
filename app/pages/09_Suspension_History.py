from ui.history import render_history
from ui.session import open_page

ROUTE = "/app/suspension/history"


def run():
    open_page(ROUTE, "Riwayat Suspension", "📜")
    render_history("suspension")


if __name__ == "__main__":
    run()
