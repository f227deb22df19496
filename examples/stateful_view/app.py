"""Stateful view -- build a page step by step on one object.

``Environment.view(name)`` returns a View that collects bindings and
host-side inheritance (``extend``/``define_block``) and renders on demand.
The compiled template is reused across ``reset()`` calls.

Run:
    python app.py
"""

from attpl import DictLoader, Environment

templates = {
    "layout": (
        "<title>@block[title]Site@end[title]</title>\n"
        "<main>@block[main]@end[main]</main>"
    ),
    "profile": (
        "@block[main]<h1>{{name}}</h1>"
        "@if[admin](expr)<p>Administrator</p>@else[admin]<p>Member</p>@end[admin]"
        "<ul>@for[roles]<li>{{value}}</li>@end[roles]</ul>"
        "@end[main]"
    ),
}

env = Environment(loader=DictLoader(templates))

view = env.view("profile")
view.extend("layout")
view.define_block("title", "Profile of {{name}}")

view.set_param("name", "Ada").set_conditional("admin", True).set_for("roles", ["owner", "dev"])
admin_output = view.render()

view.reset()
view.set_param("name", "Linus").set_conditional("admin", False).set_for("roles", [])
member_output = view.render()


def main() -> None:
    print(admin_output)
    print()
    print(member_output)


if __name__ == "__main__":
    main()
