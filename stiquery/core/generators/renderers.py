from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from stiquery.core.generators.declarations import ImportDecl, QueryInheritanceClass
from stiquery.core.generators.errors import BuildError
from stiquery.core.generators.naming import NAMESPACE_SEPARATOR, module_path

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

_TEMPLATES = {
    "php": "php/query_inheritance.php.j2",
    "python": "python/query_inheritance.py.j2",
}

_EXTENSIONS = {
    "php": ".php",
    "python": ".py",
}


def _python_module(imp: ImportDecl) -> str:
    return imp.module or module_path(imp.namespace, imp.class_name)


def _docstring_text(value: object) -> str:
    """Text safe inside a triple-double-quoted Python string."""
    return str(value).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def _phpdoc_text(value: object) -> str:
    """Text safe inside a PHP doc block."""
    return str(value).replace("*/", "*\\/")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(enabled_extensions=()),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["python_module"] = _python_module
    env.filters["docstring"] = _docstring_text
    env.filters["phpdoc"] = _phpdoc_text
    return env


def supported_languages() -> list[str]:
    return sorted(_TEMPLATES)


def render_query_inheritance(decl: QueryInheritanceClass, language: str) -> str:
    if language not in _TEMPLATES:
        raise BuildError(f"No renderer for target language {language!r} (supported: {supported_languages()})")
    template = _environment().get_template(_TEMPLATES[language])
    return template.render(cls=decl)


def relative_path(decl: QueryInheritanceClass, language: str) -> str:
    """Suggested path of the unit below an output root."""
    if language not in _EXTENSIONS:
        raise BuildError(f"No renderer for target language {language!r} (supported: {supported_languages()})")
    if language == "python":
        return module_path(decl.namespace, decl.class_name).replace(".", "/") + _EXTENSIONS[language]
    segments = [s for s in decl.namespace.split(NAMESPACE_SEPARATOR) if s]
    return "/".join(segments + [decl.class_name + _EXTENSIONS[language]])
