from ui.consultation import render_consultation
from ui.session import open_page

ROUTE = "/app/suspension/consultation"


def run():
    open_page(ROUTE, "Konsultasi Suspension", "🔧")
    render_consultation("suspension")


if __name__ == "__main__":
    run()
