"""DictLoader -- in-memory templates without filesystem.

Templates from a dictionary. No templates directory needed.
Use case: tests, generated templates, single-file apps.

Run:
    python app.py
"""

from attpl import Context, DictLoader, Environment

templates = {
    "base": """\
<!DOCTYPE html>
<html>
<head><title>@block[title]Untitled@end[title]</title></head>
<body>
    <nav>@forEach[nav_items]<a href="{{url}}">{{label}}</a>@end[nav_items]</nav>
    <main>@block[content]@end[content]</main>
</body>
</html>
""",
    "page": """\
@extend[base]
@block[title]{{title}}@end[title]
@block[content]
    <h1>{{heading}}</h1>
    <p>{{message}}</p>
    @if[beta](expr)<p class="beta">Beta feature</p>@else[beta]<p>Stable</p>@end[beta]
@end[content]
""",
}

env = Environment(loader=DictLoader(templates))
template = env.get_template("page")

context = (
    Context()
    .set_param("title", "DictLoader Demo")
    .set_param("heading", "In-Memory Templates")
    .set_param("message", "No filesystem required. Templates loaded from a dict.")
    .set_for_each(
        "nav_items",
        [
            {"url": "/", "label": "Home"},
            {"url": "/about", "label": "About"},
        ],
    )
    .set_conditional("beta", False)
)

output = template.render(context)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
