"""Placeholder substitution for prompt templates."""
from __future__ import annotations

import re
from typing import Mapping, Sequence, Union

TemplateValue = Union[str, Sequence[str]]
TemplateVariables = Mapping[str, TemplateValue]

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def _render_value(value: TemplateValue) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(str(item) for item in value)
    return str(value)


def replace_placeholders(template: str, variables: TemplateVariables) -> str:
    """Substitute ``{{NAME}}`` placeholders with values from ``variables``.

    Sequence values are joined with newlines. Placeholders without a matching
    variable are left as they are, and substituted text is never expanded a
    second time.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return _render_value(variables[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)
