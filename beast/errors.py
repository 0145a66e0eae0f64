"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from BeastUserError.

Programming errors and bugs should NOT inherit from BeastUserError:
they are wrapped into RenderError by the engines and keep their cause.
"""

from __future__ import annotations

from typing import Optional


class BeastUserError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    These errors indicate problems that the template author can fix:
    missing components, broken expressions, misused directives, bad config.
    """
    pass


class ComponentNotFoundError(BeastUserError):
    """A component source could not be found by the resource loader."""

    def __init__(self, name: str, where: str = ""):
        suffix = f" in {where}" if where else ""
        super().__init__(f"Component not found: '{name}'{suffix}")
        self.name = name


class ExpressionError(BeastUserError):
    """The expression evaluator failed on an expression."""

    def __init__(self, expression: str, cause: Optional[Exception] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Error evaluating expression '{expression}'{detail}")
        self.expression = expression
        self.cause = cause


class DirectiveError(BeastUserError):
    """A directive tag was used with missing or invalid attributes."""

    def __init__(self, tag: str, attribute: str, message: str):
        where = f"<{tag}> attribute '{attribute}'" if attribute else f"<{tag}>"
        super().__init__(f"{where}: {message}")
        self.tag = tag
        self.attribute = attribute


class ConfigError(BeastUserError):
    """Invalid engine configuration."""
    pass


class RenderError(BeastUserError):
    """Unexpected failure while rendering a template."""

    def __init__(self, message: str, template_name: str = "", cause: Optional[Exception] = None):
        where = f" in '{template_name}'" if template_name else ""
        super().__init__(f"Template rendering error{where}: {message}")
        self.template_name = template_name
        self.cause = cause


__all__ = [
    "BeastUserError",
    "ComponentNotFoundError",
    "ExpressionError",
    "DirectiveError",
    "ConfigError",
    "RenderError",
]
