"""File-based templates -- the most common real-world pattern.

Loads ``templates/<name>.tpl`` from disk, demonstrates layout inheritance
(@extend/@block), includes, a missing include, and comment stripping.

Run:
    python app.py
"""

from pathlib import Path

from attpl import Context, Environment

templates_dir = Path(__file__).parent / "templates"
env = Environment(folder=templates_dir)

NAV_ITEMS = [
    {"url": "/", "label": "Home"},
    {"url": "/about", "label": "About"},
]


def site_context() -> Context:
    return (
        Context()
        .set_param("site_name", "My Site")
        .set_for_each("nav_items", NAV_ITEMS)
        .set_conditional("show_year", True)
        .set_param("year", 2026)
    )


home_template = env.get_template("home")
about_template = env.get_template("about")

home_output = home_template.render(
    site_context()
    .set_param("title", "Welcome")
    .set_param("message", "This is an attpl-powered site with template inheritance.")
    .set_for_each("posts", [{"title": "First post"}, {"title": "Tom & Jerry"}]),
    keep_comments=False,
)

about_output = about_template.render(
    site_context()
    .set_param("title", "About Us")
    .set_param("description", "Built with attpl, directive templates for Python."),
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)
    for warning in about_template.warnings:
        print(f"warning: {warning}")


if __name__ == "__main__":
    main()
