from ui.crud import render_resource_screen
from ui.session import open_page

ROUTE = "/admin/suspension/symptoms"


def run():
    open_page(ROUTE, "Suspension Symptoms", "⚙️")
    render_resource_screen("suspension", "symptoms")


if __name__ == "__main__":
    run()
