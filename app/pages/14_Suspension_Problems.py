from ui.crud import render_resource_screen
from ui.session import open_page

ROUTE = "/admin/suspension/problems"


def run():
    open_page(ROUTE, "Suspension Problems", "⚙️")
    render_resource_screen("suspension", "problems")


if __name__ == "__main__":
    run()
