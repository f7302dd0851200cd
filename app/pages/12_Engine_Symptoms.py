from ui.crud import render_resource_screen
from ui.session import open_page

ROUTE = "/admin/engine/symptoms"


def run():
    open_page(ROUTE, "Engine Symptoms", "⚙️")
    render_resource_screen("engine", "symptoms")


if __name__ == "__main__":
    run()
