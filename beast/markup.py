"""
Adapter over the markup parser (BeautifulSoup with the stdlib html.parser
builder). The interpreter only needs: parse to a mutable tree, clone a
subtree, tell passthrough nodes apart and serialize the result.
"""

from __future__ import annotations

import copy
from typing import List, TypeVar

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

N = TypeVar("N", bound=PageElement)


def parse_markup(text: str) -> BeautifulSoup:
    """
    Parses markup into a mutable tree.

    Attribute values are kept as plain strings (no `class` splitting) and
    unknown tags such as `bs:if` keep their full prefixed name.
    """
    return BeautifulSoup(text, "html.parser", multi_valued_attributes=None)


def serialize(tree: PageElement) -> str:
    return str(tree)


def clone(node: N) -> N:
    """Deep copy of a node and its subtree, detached from any parent."""
    return copy.copy(node)


def is_passthrough(node: PageElement) -> bool:
    """Comments, doctypes, CDATA and processing instructions are left untouched."""
    return isinstance(node, PreformattedString)


def is_text(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not is_passthrough(node)


def is_element(node: PageElement) -> bool:
    return isinstance(node, Tag)


def replace_children(parent: Tag, children: List[PageElement]) -> None:
    """
    Replaces all children of `parent` with `children`, in order.

    Nodes that still belong to another parent are moved.
    """
    parent.clear()
    for child in children:
        parent.append(child)


__all__ = [
    "parse_markup",
    "serialize",
    "clone",
    "is_passthrough",
    "is_text",
    "is_element",
    "replace_children",
]
