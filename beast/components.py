"""
Component store.

Process-wide cache of rendered components. A static component is rendered
once per (locale, name, extension) and its output is reused verbatim until
the store is cleared; a dynamic component is rendered from its raw source on
every inclusion and never touches the cache.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .loaders import ComponentLoader, component_filename

logger = logging.getLogger(__name__)

# Renders raw component source and returns the output text.
RenderFn = Callable[[str], str]


@dataclass(frozen=True)
class ComponentKey:
    locale: str
    name: str
    extension: str


class ComponentStore:
    """
    Thread-safe get-or-render store for components.

    Static outputs are assumed to be deterministic and independent of
    per-request Context data; concurrent first renders of the same static
    component are resolved as "first writer wins".
    """

    def __init__(self, loader: Optional[ComponentLoader] = None):
        self.loader = loader
        self._static: Dict[ComponentKey, str] = {}
        self._lock = threading.Lock()

    def raw(self, name: str, extension: str, loader: Optional[ComponentLoader] = None) -> str:
        """
        Returns the unrendered source of a component.

        Raises:
            ComponentNotFoundError: If the loader does not know the component
        """
        source_loader = loader or self.loader
        if source_loader is None:
            raise RuntimeError("ComponentStore has no loader configured")
        return source_loader.load(component_filename(name, extension))

    def get(
        self,
        name: str,
        locale: str,
        extension: str,
        is_static: bool,
        render: RenderFn,
        loader: Optional[ComponentLoader] = None,
    ) -> str:
        """
        Returns the rendered output of a component.

        Args:
            name: Component name (without `.component<extension>`)
            locale: Locale tag of the current render
            extension: Engine flavour extension (`.html`, `.txt`, `.css`)
            is_static: Serve/populate the static cache
            render: Renders the raw source; called only when needed
            loader: Loader overriding the store's default

        Returns:
            Rendered component text

        Raises:
            ComponentNotFoundError: If the component source does not exist
        """
        key = ComponentKey(locale, name, extension)
        if is_static:
            with self._lock:
                cached = self._static.get(key)
            if cached is not None:
                logger.debug(f"Static component hit: {name}{extension} [{locale}]")
                return cached

        source = self.raw(name, extension, loader)
        output = render(source)

        if is_static:
            with self._lock:
                output = self._static.setdefault(key, output)
            logger.debug(f"Stored static component: {name}{extension} [{locale}]")
        return output

    def clear(self) -> None:
        with self._lock:
            self._static.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._static

    def __len__(self) -> int:
        with self._lock:
            return len(self._static)


_default_store = ComponentStore()


def get_default_store() -> ComponentStore:
    """
    Store shared by engines created without an explicit one.

    Keys carry no loader identity: engines reading components from different
    places but sharing this store also share static outputs of same-named
    components. Give each such engine its own ComponentStore.
    """
    return _default_store


__all__ = ["ComponentStore", "ComponentKey", "get_default_store"]
