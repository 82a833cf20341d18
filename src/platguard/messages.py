"""
Failure message rendering.

Guard failure messages are Jinja2 templates so applications can reword them
in configuration. The defaults reproduce the historical wording exactly.
"""

from functools import lru_cache
from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, UndefinedError

from platguard.errors import MessageTemplateError


_environment = Environment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=False,
)


@lru_cache(maxsize=64)
def _compile(source: str) -> Template:
    try:
        return _environment.from_string(source)
    except TemplateSyntaxError as e:
        raise MessageTemplateError(str(e), template=source) from e


def render_message(source: str, **variables: Any) -> str:
    """
    Render a message template.

    Platform values are rendered by their plain names (``web``, not
    ``Platform.WEB``).
    """
    template = _compile(source)
    try:
        return template.render(**{key: str(value) for key, value in variables.items()})
    except UndefinedError as e:
        raise MessageTemplateError(str(e), template=source) from e
