"""
Jinja2 environment shared by the code generator and the translation modal.
"""
from jinja2 import Environment, PackageLoader, select_autoescape

# Only the HTML templates are autoescaped; the *.py.j2 stubs emit Python source
environment = Environment(
    loader=PackageLoader("sqlmodel_translations", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render(template_name: str, **context) -> str:
    return environment.get_template(template_name).render(**context)
