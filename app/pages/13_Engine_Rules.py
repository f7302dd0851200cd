from ui.crud import render_rules_screen
from ui.session import open_page

ROUTE = "/admin/engine/rules"


def run():
    open_page(ROUTE, "Engine Rules", "⚙️")
    render_rules_screen("engine")


if __name__ == "__main__":
    run()
