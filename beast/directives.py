"""
Directive interpreter for markup templates.

Walks a parsed markup tree and rewrites it: directive tags (`bs:if`,
`bs:for`, `bs:component`, ...) are replaced by their output, prefixed
attributes are evaluated and `{{ expr }}` interpolations are substituted.
For every parent the replacement list of its children is computed first and
applied afterwards, so the tree is never mutated while it is being iterated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from bs4.element import PageElement, Tag

from .context import Context
from .errors import DirectiveError
from .interpolation import has_interpolation, to_text
from .markup import (
    clone,
    is_element,
    is_passthrough,
    is_text,
    parse_markup,
    replace_children,
    serialize,
)
from .resolver import parse_literal
from .scope import ScopeId
from .session import RenderSession

if TYPE_CHECKING:
    from .engines import HtmlEngine

logger = logging.getLogger(__name__)

DirectiveHandler = Callable[[Tag, Context, ScopeId], List[PageElement]]

_FALSE_FLAGS = ("false", "0", "no")


def own_text(tag: Tag) -> str:
    """Text of the direct text children of `tag`."""
    return "".join(str(child) for child in tag.contents if is_text(child))


def is_flag_set(tag: Tag, attribute: str) -> bool:
    """Boolean attribute: present (with any value except false/0/no)."""
    value = tag.get(attribute)
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSE_FLAGS


class DirectiveInterpreter:
    """
    Tree-walking interpreter of one render pass.

    All per-render state comes from the RenderSession; the engine provides
    configuration, the component loader and the shared component store.
    """

    def __init__(self, engine: HtmlEngine, session: RenderSession):
        self.engine = engine
        self.session = session
        self.prefix = engine.config.prefix.lower()

        self._directives: Dict[str, DirectiveHandler] = {
            "var": self._render_var,
            "if": self._render_if,
            "switch": self._render_switch,
            "for": self._render_for,
            "repeat": self._render_repeat,
            "component": self._render_component,
            "router": self._render_router,
            "case": self._render_orphan,
            "default": self._render_orphan,
            "route": self._render_orphan,
        }

    # ======= Public API =======

    def render(self, node: Tag, context: Context, scope: ScopeId) -> None:
        """
        Renders the children of `node` in place.

        Args:
            node: Root of the (sub)tree, usually a parsed document
            context: Variable bindings
            scope: Scope of the subtree
        """
        self._render_children(node, context, scope)

    def render_component(self, name: str, is_static: bool, context: Context, scope: ScopeId) -> str:
        """
        Renders a component through the component store.

        Returns:
            Serialized markup of the rendered component

        Raises:
            ComponentNotFoundError: If the component does not exist
        """
        component_scope = scope.child("component", self.session.next_position(), name)

        def render_source(source: str) -> str:
            fragment = parse_markup(source)
            if is_static:
                with self.session.static_component(name, context):
                    self.render(fragment, context, component_scope)
            else:
                self.render(fragment, context, component_scope)
            return serialize(fragment)

        return self.engine.store.get(
            name,
            context.locale,
            self.engine.component_extension,
            is_static,
            render_source,
            loader=self.engine.loader,
        )

    # ======= Tree walking =======

    def _render_children(self, parent: Tag, context: Context, scope: ScopeId) -> None:
        rendered: List[PageElement] = []
        for child in list(parent.contents):
            rendered.extend(self._render_node(child, context, scope))
        replace_children(parent, rendered)

    def _render_body(self, body: List[PageElement], context: Context, scope: ScopeId) -> List[PageElement]:
        """Renders fresh copies of `body`, leaving the originals untouched."""
        rendered: List[PageElement] = []
        for node in body:
            rendered.extend(self._render_node(clone(node), context, scope))
        return rendered

    def _render_node(self, node: PageElement, context: Context, scope: ScopeId) -> List[PageElement]:
        if is_passthrough(node):
            return [node]

        if is_text(node):
            text = str(node)
            if not has_interpolation(text):
                return [node]
            # keep the string class: script/style text is serialized unescaped
            return [type(node)(self.session.interpolate(text, context, scope))]

        if not is_element(node):
            return [node]

        handler = self._directive_for(node)
        if handler is not None:
            return handler(node, context, scope)
        return self._render_element(node, context, scope)

    def _directive_for(self, tag: Tag) -> Optional[DirectiveHandler]:
        name = tag.name or ""
        if not name.startswith(self.prefix):
            return None
        return self._directives.get(name[len(self.prefix):])

    def _render_element(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        if tag.attrs:
            tag.attrs = self._render_attributes(tag, context, scope)
        self._render_children(tag, context, scope)
        return [tag]

    def _render_attributes(self, tag: Tag, context: Context, scope: ScopeId) -> Dict[str, Any]:
        attributes: Dict[str, Any] = {}
        for name, value in tag.attrs.items():
            if name.startswith(self.prefix):
                target = name[len(self.prefix):]
                if not str(value or "").strip():
                    # valueless flag such as bs:disabled
                    attributes[target] = ""
                elif isinstance(value, str) and has_interpolation(value):
                    attributes[target] = self.session.interpolate(value, context, scope)
                else:
                    attributes[target] = to_text(self.session.evaluate(value, context, scope))
            elif isinstance(value, str) and has_interpolation(value):
                attributes[name] = self.session.interpolate(value, context, scope)
            else:
                attributes[name] = value
        return attributes

    # ======= Directives =======

    def _render_var(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        for statement in own_text(tag).split(";"):
            statement = statement.strip()
            if not statement:
                continue
            name, sep, expression = statement.partition("=")
            name = name.strip()
            if not sep or not name.isidentifier():
                raise DirectiveError(tag.name, "", f"invalid assignment '{statement}'")
            value = self.session.evaluate_script(expression, context)
            context[name] = value
            self.session.bridge.bind(name, value)
            logger.debug(f"Bound variable '{name}' in scope {scope}")
        return []

    def _render_if(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        condition = self._required(tag, "condition")
        if not self.session.condition(condition, context, scope):
            return []
        self._render_children(tag, context, scope)
        return list(tag.contents)

    def _render_switch(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        expression = self._required(tag, "var")
        value = self.session.evaluate(expression, context, scope)
        if value is None:
            raise DirectiveError(tag.name, "var", f"'{expression}' resolved to no value")

        branch: Optional[Tag] = None
        for case in self._children_named(tag, "case"):
            if self._case_matches(self._required(case, "match"), value, context, scope):
                branch = case
                break

        if branch is None:
            defaults = self._children_named(tag, "default")
            if not defaults:
                return []
            branch = defaults[0]

        self._render_children(branch, context, scope)
        return list(branch.contents)

    def _case_matches(self, match: str, value: Any, context: Context, scope: ScopeId) -> bool:
        resolution = self.session.resolve(match, context, scope)
        candidate = resolution.value if resolution.found else match
        # True == 1 in Python; booleans only match booleans
        if isinstance(candidate, bool) == isinstance(value, bool) and candidate == value:
            return True
        return isinstance(candidate, str) and candidate == to_text(value)

    def _render_for(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        item = self._required(tag, "item")
        source = self._required(tag, "in")
        if not item.isidentifier():
            raise DirectiveError(tag.name, "item", f"'{item}' is not a valid variable name")

        collection = self.session.evaluate(source, context, scope)
        if collection is None:
            logger.debug(f"Loop source '{source}' has no value; nothing to render")
            return []
        elements = self._as_sequence(tag, source, collection)

        position = self.session.next_position()
        body = list(tag.contents)
        rendered: List[PageElement] = []
        for index, element in enumerate(elements):
            loop_context = context.child()
            loop_context[item] = element
            if self.engine.config.loop_index:
                loop_context[f"{item}_index"] = index
            loop_scope = scope.child("for", position, source, index)
            rendered.extend(self._render_body(body, loop_context, loop_scope))

        # loop bindings must not be visible to the following siblings
        self.session.bridge.reflect(context)
        return rendered

    def _as_sequence(self, tag: Tag, source: str, collection: Any) -> List[Any]:
        if isinstance(collection, (str, bytes)) or not isinstance(collection, Iterable):
            raise DirectiveError(
                tag.name, "in", f"'{source}' is not a collection ({type(collection).__name__})"
            )
        if isinstance(collection, Mapping):
            return list(collection.keys())
        return list(collection)

    def _render_repeat(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        times = self._repeat_count(tag, self._required(tag, "times"), context, scope)
        position = self.session.next_position()
        body = list(tag.contents)
        rendered: List[PageElement] = []
        for index in range(times):
            rendered.extend(self._render_body(body, context, scope.child("repeat", position, index)))
        return rendered

    def _repeat_count(self, tag: Tag, raw: str, context: Context, scope: ScopeId) -> int:
        literal = parse_literal(raw)
        if literal.found:
            value = literal.value
        else:
            value = self.session.resolve(raw, context, scope).value

        if isinstance(value, bool) or not isinstance(value, int):
            raise DirectiveError(tag.name, "times", f"'{raw}' is not an integer")
        if value < 0:
            raise DirectiveError(tag.name, "times", f"'{raw}' is negative ({value})")
        return value

    def _render_component(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        name = self._required(tag, "name")
        if has_interpolation(name):
            name = self.session.interpolate(name, context, scope).strip()
        return self._include(name, is_flag_set(tag, "static"), context, scope)

    def _render_router(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        variable = self.engine.config.router_variable
        path = context.get(variable)
        if path is None:
            logger.debug(f"Router: no '{variable}' in context; router removed")
            return []

        wanted = str(path).strip().lower()
        for route in self._children_named(tag, "route"):
            if self._required(route, "path").lower() == wanted:
                component = self._required(route, "component")
                return self._include(component, is_flag_set(route, "static"), context, scope)

        logger.debug(f"Router: no route matches '{path}'; router removed")
        return []

    def _render_orphan(self, tag: Tag, context: Context, scope: ScopeId) -> List[PageElement]:
        raise DirectiveError(tag.name, "", "must be a direct child of its parent directive")

    # ======= Helpers =======

    def _include(self, name: str, is_static: bool, context: Context, scope: ScopeId) -> List[PageElement]:
        output = self.render_component(name, is_static, context, scope)
        return list(parse_markup(output).contents)

    def _children_named(self, tag: Tag, local_name: str) -> List[Tag]:
        full_name = self.prefix + local_name
        return [child for child in tag.contents if is_element(child) and child.name == full_name]

    def _required(self, tag: Tag, attribute: str) -> str:
        value = tag.get(attribute)
        if value is None or not str(value).strip():
            raise DirectiveError(tag.name, attribute, "attribute is required")
        return str(value).strip()


__all__ = ["DirectiveInterpreter", "own_text", "is_flag_set"]
