from ui.crud import render_rules_screen
from ui.session import open_page

ROUTE = "/admin/suspension/rules"


def run():
    open_page(ROUTE, "Suspension Rules", "⚙️")
    render_rules_screen("suspension")


if __name__ == "__main__":
    run()
