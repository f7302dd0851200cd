from ui.consultation import render_consultation
from ui.session import open_page

ROUTE = "/app/engine/consultation"


def run():
    open_page(ROUTE, "Konsultasi Engine", "🔧")
    render_consultation("engine")


if __name__ == "__main__":
    run()
