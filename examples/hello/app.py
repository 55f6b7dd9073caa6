"""Hello World -- the simplest xmlit example.

Compile a template from a string once, then render it with different values.
No templates directory needed.

Run:
    python app.py
"""

import xmlit

# Compile once: parse + validate
template = xmlit.compile("<greeting>Hello, {name}!</greeting>")

# Render with values
output = xmlit.render(template, {"name": "World"})

# Literal interpolations, the </> shorthand and both output layouts
zoo = xmlit.compile(
    """
    <zoo name="Lorem Ipsum" openingYear={2013}>
        <cat>{name}</>
    </zoo>
    """
)
zoo_output = zoo.render(name="Tony")
zoo_pretty = zoo.render(name="Tony", config=xmlit.RenderConfig.pretty())


def main() -> None:
    print(output)
    print()

    # Multiple renders with different values
    for name in ["xmlit", "XML", "Python"]:
        print(template.render(name=name))
    print()

    print(zoo_output)
    print(zoo_pretty)


if __name__ == "__main__":
    main()
