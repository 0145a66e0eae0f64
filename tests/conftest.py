from pathlib import Path

import pytest

from beast.components import ComponentStore
from beast.context import Context
from beast.engines import CssEngine, HtmlEngine, TextEngine
from beast.expressions import CompiledExpressionCache
from beast.loaders import DictLoader
from beast.scope import ScopeId
from beast.session import RenderSession

from tests.infrastructure.file_utils import write_components
from tests.infrastructure.rendering_utils import html_components, text_components


@pytest.fixture
def store() -> ComponentStore:
    """Fresh component store, isolated from the process-wide default."""
    return ComponentStore()


@pytest.fixture
def expressions() -> CompiledExpressionCache:
    return CompiledExpressionCache()


@pytest.fixture
def components() -> DictLoader:
    """A small component library used by the directive tests."""
    return html_components(
        card='<div class="card"><h3>{{ title }}</h3><bs:component name="footer"></bs:component></div>',
        footer="<small>{{ owner }}</small>",
        greet="<span>{{ name }}</span>",
        badge="<b>{{ user.name }}</b>",
        home="<h1>Home</h1>",
        about="<h1>About</h1>",
        hello="<i>{{ greeting }}</i>",
    )


@pytest.fixture
def engine(components, store, expressions) -> HtmlEngine:
    return HtmlEngine(loader=components, store=store, expressions=expressions)


@pytest.fixture
def text_engine(store, expressions) -> TextEngine:
    loader = text_components(signature="-- {{ author }}", banner="*** {{ title }} ***")
    return TextEngine(loader=loader, store=store, expressions=expressions)


@pytest.fixture
def css_engine(store, expressions) -> CssEngine:
    loader = DictLoader({"theme.component.css": ".btn { color: {{ color }}; }"})
    return CssEngine(loader=loader, store=store, expressions=expressions)


@pytest.fixture
def session(expressions) -> RenderSession:
    s = RenderSession(expressions)
    yield s
    s.close()


@pytest.fixture
def root_scope() -> ScopeId:
    return ScopeId.root()


@pytest.fixture
def ctx() -> Context:
    return Context({"user": {"name": "Ann", "roles": ["admin", "dev"]}, "count": 3})


@pytest.fixture
def components_dir(tmp_path: Path) -> Path:
    """Components directory with a nested sub-folder."""
    return write_components(
        tmp_path / "components",
        {
            "card.component.html": "<div>{{ title }}</div>",
            "layout/footer.component.html": "<footer>{{ owner }}</footer>",
            "mail.component.txt": "Hi {{ name }}",
            "notes.txt": "not a component",
        },
    )
