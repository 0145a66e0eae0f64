"""
Template engines.

Each engine flavour binds the directive machinery to a component file
extension: HtmlEngine interprets markup trees, TextEngine and CssEngine
only substitute `{{ expr }}` interpolations in plain text.

Every top-level call opens a fresh RenderSession and closes it when the
call returns, so resolved values never leak between renders.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from .components import ComponentStore, get_default_store
from .config import EngineConfig
from .context import Context
from .directives import DirectiveInterpreter
from .errors import BeastUserError, RenderError
from .expressions import CompiledExpressionCache, get_shared_cache
from .loaders import COMPONENT_MARKER, ComponentLoader, FileSystemLoader, PackageLoader
from .markup import parse_markup, serialize
from .scope import ScopeId
from .session import RenderSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BeastEngine(ABC):
    """
    Base class of the template engines.

    Holds the shared collaborators (config, component loader, component
    store, compiled expression cache); per-render state lives in sessions.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        loader: Optional[ComponentLoader] = None,
        store: Optional[ComponentStore] = None,
        expressions: Optional[CompiledExpressionCache] = None,
    ):
        """
        Args:
            config: Engine settings; defaults apply when omitted
            loader: Component source loader; derived from config when omitted
            store: Component store; the process-wide store when omitted, which is
                shared with every other engine regardless of its loader
            expressions: Compiled expression cache; the process-wide cache when omitted
        """
        self.config = config or EngineConfig()
        self.loader = loader or self._default_loader()
        self.store = store if store is not None else get_default_store()
        self.expressions = expressions if expressions is not None else get_shared_cache()

    def _default_loader(self) -> ComponentLoader:
        if self.config.components_package:
            return PackageLoader(self.config.components_package)
        return FileSystemLoader(self.config.components_path or "components")

    @property
    @abstractmethod
    def component_extension(self) -> str:
        """Extension of component files served by this engine."""
        pass

    # ======= Public API =======

    def process(self, template: str, context: Optional[Mapping[str, Any]] = None, template_name: str = "") -> str:
        """
        Renders a template string.

        Args:
            template: Template source
            context: Variable bindings; a Context is mutated by `bs:var`
            template_name: Optional name for diagnostics

        Returns:
            Rendered output

        Raises:
            BeastUserError: On missing components, failing expressions or misused directives
        """
        ctx = self._context(context)
        return self._run(lambda session: self._render(template, ctx, session), template_name)

    def process_component(
        self,
        name: str,
        context: Optional[Mapping[str, Any]] = None,
        static: bool = False,
    ) -> str:
        """
        Renders a named component as the top-level template.

        Args:
            name: Component name (file `<name>.component<extension>`)
            context: Variable bindings
            static: Serve and populate the static component cache

        Returns:
            Rendered output

        Raises:
            ComponentNotFoundError: If the component does not exist
        """
        ctx = self._context(context)
        return self._run(lambda session: self._render_component(name, static, ctx, session), name)

    def get_component(self, name: str) -> str:
        """Returns the raw source of a component."""
        return self.store.raw(name, self.component_extension, self.loader)

    def list_components(self) -> List[str]:
        """Names of the components available for this engine's extension."""
        suffix = f"{COMPONENT_MARKER}{self.component_extension}"
        return [n[: -len(suffix)] for n in self.loader.names() if n.endswith(suffix)]

    def clear_cache(self) -> None:
        """Drops rendered static components and compiled expressions."""
        self.store.clear()
        self.expressions.clear()

    # ======= Internals =======

    @abstractmethod
    def _render(self, template: str, context: Context, session: RenderSession) -> str:
        pass

    @abstractmethod
    def _render_component(self, name: str, static: bool, context: Context, session: RenderSession) -> str:
        pass

    def _context(self, context: Optional[Mapping[str, Any]]) -> Context:
        return Context.from_mapping(context, self.config.default_locale)

    def _run(self, func: Callable[[RenderSession], T], template_name: str) -> T:
        session = RenderSession(self.expressions)
        logger.debug(f"Rendering '{template_name or '<string>'}' with {type(self).__name__}")
        try:
            return func(session)
        except BeastUserError:
            raise
        except Exception as e:
            raise RenderError(str(e), template_name, e) from e
        finally:
            session.close()


class HtmlEngine(BeastEngine):
    """Markup engine: interprets directive tags and serializes the rewritten tree."""

    @property
    def component_extension(self) -> str:
        return ".html"

    def _render(self, template: str, context: Context, session: RenderSession) -> str:
        tree = parse_markup(template)
        DirectiveInterpreter(self, session).render(tree, context, ScopeId.root())
        return serialize(tree)

    def _render_component(self, name: str, static: bool, context: Context, session: RenderSession) -> str:
        interpreter = DirectiveInterpreter(self, session)
        return interpreter.render_component(name, static, context, ScopeId.root())


class TextEngine(BeastEngine):
    """Plain-text engine: only `{{ expr }}` interpolations are processed."""

    @property
    def component_extension(self) -> str:
        return ".txt"

    def _render(self, template: str, context: Context, session: RenderSession) -> str:
        return session.interpolate(template, context, ScopeId.root())

    def _render_component(self, name: str, static: bool, context: Context, session: RenderSession) -> str:
        scope = ScopeId.root().child("component", name)

        def render_source(source: str) -> str:
            if not static:
                return session.interpolate(source, context, scope)
            with session.static_component(name, context):
                return session.interpolate(source, context, scope)

        return self.store.get(
            name, context.locale, self.component_extension, static, render_source, loader=self.loader
        )


class CssEngine(TextEngine):
    """Stylesheet flavour of the text engine."""

    @property
    def component_extension(self) -> str:
        return ".css"


ENGINES = {
    "html": HtmlEngine,
    "text": TextEngine,
    "css": CssEngine,
}


def create_engine(kind: str = "html", **kwargs: Any) -> BeastEngine:
    """
    Creates an engine by flavour name (`html`, `text`, `css`).

    Raises:
        ValueError: For unknown flavours
    """
    try:
        engine_cls = ENGINES[kind]
    except KeyError:
        raise ValueError(f"Unknown engine '{kind}'. Available: {', '.join(ENGINES)}") from None
    return engine_cls(**kwargs)


__all__ = ["BeastEngine", "HtmlEngine", "TextEngine", "CssEngine", "create_engine", "ENGINES"]
