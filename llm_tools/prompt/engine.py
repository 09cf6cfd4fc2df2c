"""Prompt engine: template registry and rendering.

Placeholders use the ``{{.name}}`` form and are the only special syntax. Before
rendering, each placeholder is rewritten to a positional slot (``v0``, ``v1``, ...)
so that names such as ``range`` or ``true`` are looked up in the caller's bindings
and never in Jinja's globals or literals. The sandboxed Jinja2 environment runs
with ``StrictUndefined`` (an unbound placeholder is an error, not an empty
string), an empty globals table, and delimiters that plain text cannot contain.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jinja2 import StrictUndefined, TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from ..errors import InvalidArgumentError, NotFoundError, TemplateRenderError

logger = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(r"\{\{\.(\w+)\}\}")


@dataclass(frozen=True)
class Template:
    """A registered prompt template. ``variables`` is derived from ``content``."""

    name: str
    content: str
    version: str = ""
    variables: Tuple[str, ...] = ()
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "content": self.content,
            "version": self.version,
            "variables": list(self.variables),
            "metadata": dict(self.metadata),
        }


def extract_variables(content: str) -> List[str]:
    """Placeholder names in order of first appearance, without duplicates."""
    seen = set()
    variables = []
    for match in VARIABLE_PATTERN.finditer(content):
        name = match.group(1)
        if name not in seen:
            seen.add(name)
            variables.append(name)
    return variables


# NUL-framed delimiters: template text never produces Jinja syntax on its own
_VAR_START, _VAR_END = "\x00{{", "}}\x00"


def _build_environment() -> SandboxedEnvironment:
    env = SandboxedEnvironment(
        variable_start_string=_VAR_START,
        variable_end_string=_VAR_END,
        block_start_string="\x00{%",
        block_end_string="%}\x00",
        comment_start_string="\x00{#",
        comment_end_string="#}\x00",
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    env.globals = {}
    return env


def _to_jinja_source(content: str) -> Tuple[str, List[str]]:
    """
    Rewrite ``{{.name}}`` placeholders into positional Jinja slots.

    Returns:
        (jinja source, placeholder names where names[i] fills slot ``v{i}``)
    """
    names = extract_variables(content)
    slots = {name: f"v{index}" for index, name in enumerate(names)}
    source = VARIABLE_PATTERN.sub(
        lambda match: f"{_VAR_START} {slots[match.group(1)]} {_VAR_END}",
        content.replace("\x00", ""),
    )
    return source, names


class PromptEngine:
    """
    Registry of named templates.

    Not internally synchronized: share one instance across requests only
    when template writes are confined to start-up or guarded by the caller.
    """

    def __init__(self):
        self._templates: Dict[str, Template] = {}
        self._env = _build_environment()

    def add_template(self, template: Optional[Template]) -> Template:
        """
        Register a template, replacing any existing one with the same name.

        Args:
            template: Template to register; ``variables`` is recomputed

        Returns:
            The stored template

        Raises:
            InvalidArgumentError: If template is None or name/content is empty
        """
        if template is None:
            raise InvalidArgumentError("template cannot be None")
        if not template.name:
            raise InvalidArgumentError("template name cannot be empty")
        if not template.content:
            raise InvalidArgumentError("template content cannot be empty")

        stored = replace(
            template,
            variables=tuple(extract_variables(template.content)),
            metadata=dict(template.metadata or {}),
        )
        self._templates[stored.name] = stored
        logger.debug(f"Registered template {stored.name!r} variables={stored.variables}")
        return stored

    def get_template(self, name: str) -> Template:
        """
        Look up a template by name.

        Raises:
            NotFoundError: If no template is registered under name
        """
        template = self._templates.get(name)
        if template is None:
            raise NotFoundError("template", name)
        return template

    def render(self, name: str, bindings: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a registered template.

        Args:
            name: Template name
            bindings: Values for the template's placeholders

        Returns:
            Rendered prompt text

        Raises:
            NotFoundError: If no template is registered under name
            TemplateRenderError: If the template does not parse or a placeholder is unbound
        """
        template = self.get_template(name)

        try:
            source, names = _to_jinja_source(template.content)
            compiled = self._env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateRenderError(
                f"failed to parse template '{name}': {e}", template_name=name
            ) from e

        bindings = bindings or {}
        missing = [placeholder for placeholder in names if placeholder not in bindings]
        if missing:
            raise TemplateRenderError(
                f"unresolved variable in template '{name}': '{missing[0]}' is undefined",
                template_name=name,
            )

        try:
            slots = {f"v{index}": bindings[placeholder] for index, placeholder in enumerate(names)}
            return compiled.render(**slots)
        except UndefinedError as e:
            raise TemplateRenderError(
                f"unresolved variable in template '{name}': {e}", template_name=name
            ) from e
        except Exception as e:
            raise TemplateRenderError(
                f"failed to execute template '{name}': {e}", template_name=name
            ) from e

    def render_with_variables(self, name: str, variables: Mapping[str, str]) -> str:
        """Render with string-only bindings."""
        return self.render(name, {key: str(value) for key, value in variables.items()})

    def list_templates(self) -> List[str]:
        """Registered template names. Callers must not rely on the order."""
        return list(self._templates)

    def remove_template(self, name: str) -> None:
        """
        Remove a template.

        Raises:
            NotFoundError: If no template is registered under name
        """
        if name not in self._templates:
            raise NotFoundError("template", name)
        del self._templates[name]
        logger.debug(f"Removed template {name!r}")

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates
