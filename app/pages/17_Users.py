from ui.crud import render_users_screen
from ui.session import open_page

ROUTE = "/admin/users"


def run():
    open_page(ROUTE, "Users", "👥")
    render_users_screen()


if __name__ == "__main__":
    run()
