from ui.crud import render_resource_screen
from ui.session import open_page

ROUTE = "/admin/engine/problems"


def run():
    open_page(ROUTE, "Engine Problems", "⚙️")
    render_resource_screen("engine", "problems")


if __name__ == "__main__":
    run()
