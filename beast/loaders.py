"""
Component source loaders.

A component named `card` for the HTML engine lives in a file called
`card.component.html`. Loaders map such file names to raw source text and
raise ComponentNotFoundError when a file does not exist.
"""

from __future__ import annotations

import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from .errors import ComponentNotFoundError

logger = logging.getLogger(__name__)

COMPONENT_MARKER = ".component"


def component_filename(name: str, extension: str) -> str:
    """`card`, `.html` -> `card.component.html`"""
    return f"{name}{COMPONENT_MARKER}{extension}"


def is_component_file(filename: str) -> bool:
    return COMPONENT_MARKER in filename and not filename.startswith(".")


@runtime_checkable
class ComponentLoader(Protocol):
    """Contract of the external resource loader."""

    def load(self, filename: str) -> str:
        """
        Returns the raw source of a component file.

        Raises:
            ComponentNotFoundError: If the file is unknown to the loader
        """
        ...

    def names(self) -> List[str]:
        """Lists the component file names the loader can serve."""
        ...


class DictLoader:
    """In-memory loader: file name -> source text."""

    def __init__(self, sources: Optional[Mapping[str, str]] = None):
        self.sources: Dict[str, str] = dict(sources or {})

    def load(self, filename: str) -> str:
        try:
            return self.sources[filename]
        except KeyError:
            raise ComponentNotFoundError(filename, "memory") from None

    def names(self) -> List[str]:
        return sorted(self.sources)


class FileSystemLoader:
    """
    Loads components from a directory tree.

    Every component file below `root` is indexed by its file name, so
    components may be grouped into sub-directories freely. The index is
    built lazily on first use; `refresh()` rebuilds it.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._index: Optional[Dict[str, Path]] = None

    def _scan(self) -> Dict[str, Path]:
        index: Dict[str, Path] = {}
        if not self.root.is_dir():
            logger.warning(f"Components directory not found: {self.root}")
            return index
        for path in sorted(self.root.rglob(f"*{COMPONENT_MARKER}*")):
            if not path.is_file() or not is_component_file(path.name):
                continue
            if path.name in index:
                logger.warning(
                    f"Duplicate component file '{path.name}': {path} shadows {index[path.name]}"
                )
                continue
            index[path.name] = path
            logger.debug(f"Indexed component: {path.name}")
        return index

    def _get_index(self) -> Dict[str, Path]:
        if self._index is None:
            self._index = self._scan()
        return self._index

    def refresh(self) -> None:
        self._index = None

    def load(self, filename: str) -> str:
        path = self._get_index().get(filename)
        if path is None:
            raise ComponentNotFoundError(filename, str(self.root))
        return path.read_text(encoding="utf-8")

    def names(self) -> List[str]:
        return sorted(self._get_index())


class PackageLoader:
    """
    Loads components shipped as package data, e.g. `myapp/components/`.
    """

    def __init__(self, package: str, folder: str = "components"):
        self.package = package
        self.folder = folder

    def _files(self) -> Dict[str, Traversable]:
        base = resources.files(self.package).joinpath(self.folder)
        found: Dict[str, Traversable] = {}
        stack = [base]
        while stack:
            current = stack.pop()
            if not current.is_dir():
                continue
            for entry in current.iterdir():
                if entry.is_dir():
                    stack.append(entry)
                elif is_component_file(entry.name):
                    found.setdefault(entry.name, entry)
        return found

    def load(self, filename: str) -> str:
        entry = self._files().get(filename)
        if entry is None:
            raise ComponentNotFoundError(filename, f"{self.package}/{self.folder}")
        return entry.read_text(encoding="utf-8")

    def names(self) -> List[str]:
        return sorted(self._files())


__all__ = [
    "ComponentLoader",
    "DictLoader",
    "FileSystemLoader",
    "PackageLoader",
    "component_filename",
    "is_component_file",
]
