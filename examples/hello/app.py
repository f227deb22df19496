"""Hello World -- the simplest attpl example.

Compile a template from a string and render it with a Context.
No templates directory needed.

Run:
    python app.py
"""

from attpl import Context, DictLoader, Environment

env = Environment(loader=DictLoader({}))

# Compile from string
template = env.from_string("Hello, {{name}}!")

# Render with context
output = template.render(Context().set_param("name", "World"))


def main() -> None:
    print(output)
    print()

    # One compiled template, one Context per render
    for name in ["attpl", "<script>", "Python"]:
        print(template.render(Context().set_param("name", name)))


if __name__ == "__main__":
    main()
