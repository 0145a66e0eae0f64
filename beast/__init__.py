"""
Directive-driven template renderer.

Templates are markup (or plain text) with `bs:` directive tags and
`{{ expr }}` interpolations, rendered against a Context of variables.
"""

from __future__ import annotations

from .components import ComponentStore, get_default_store
from .config import EngineConfig, load_config
from .context import Context
from .engines import BeastEngine, CssEngine, HtmlEngine, TextEngine, create_engine
from .errors import (
    BeastUserError,
    ComponentNotFoundError,
    ConfigError,
    DirectiveError,
    ExpressionError,
    RenderError,
)
from .loaders import DictLoader, FileSystemLoader, PackageLoader
from .properties import register_reader

__all__ = [
    "BeastEngine",
    "HtmlEngine",
    "TextEngine",
    "CssEngine",
    "create_engine",
    "Context",
    "EngineConfig",
    "load_config",
    "ComponentStore",
    "get_default_store",
    "DictLoader",
    "FileSystemLoader",
    "PackageLoader",
    "register_reader",
    "BeastUserError",
    "ComponentNotFoundError",
    "ConfigError",
    "DirectiveError",
    "ExpressionError",
    "RenderError",
]
