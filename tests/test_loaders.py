"""Tests for component source loaders."""

import logging
from pathlib import Path

import pytest

from beast.errors import ComponentNotFoundError
from beast.loaders import (
    ComponentLoader,
    DictLoader,
    FileSystemLoader,
    PackageLoader,
    component_filename,
    is_component_file,
)

from tests.infrastructure.file_utils import write, write_components


class TestFileNames:

    def test_component_filename(self):
        assert component_filename("card", ".html") == "card.component.html"
        assert component_filename("theme", ".css") == "theme.component.css"

    def test_is_component_file(self):
        assert is_component_file("card.component.html")
        assert not is_component_file("card.html")
        assert not is_component_file(".component.html")


class TestDictLoader:

    def test_load_and_names(self):
        loader = DictLoader({"b.component.html": "B", "a.component.html": "A"})

        assert loader.load("a.component.html") == "A"
        assert loader.names() == ["a.component.html", "b.component.html"]
        assert isinstance(loader, ComponentLoader)

    def test_missing(self):
        with pytest.raises(ComponentNotFoundError) as exc_info:
            DictLoader().load("nope.component.html")
        assert exc_info.value.name == "nope.component.html"


class TestFileSystemLoader:

    def test_recursive_index(self, components_dir):
        """Components are found in sub-directories by file name."""
        loader = FileSystemLoader(components_dir)

        assert loader.load("footer.component.html") == "<footer>{{ owner }}</footer>"
        assert loader.names() == [
            "card.component.html",
            "footer.component.html",
            "mail.component.txt",
        ]

    def test_missing_component(self, components_dir):
        with pytest.raises(ComponentNotFoundError):
            FileSystemLoader(components_dir).load("ghost.component.html")

    def test_missing_directory(self, tmp_path, caplog):
        """A missing root logs a warning and serves nothing."""
        with caplog.at_level(logging.WARNING, logger="beast.loaders"):
            loader = FileSystemLoader(tmp_path / "absent")
            assert loader.names() == []

        assert "Components directory not found" in caplog.text

    def test_duplicate_names_keep_first(self, tmp_path, caplog):
        root = write_components(tmp_path / "c", {
            "a/dup.component.html": "first",
            "b/dup.component.html": "second",
        })

        with caplog.at_level(logging.WARNING, logger="beast.loaders"):
            assert FileSystemLoader(root).load("dup.component.html") == "first"
        assert "Duplicate component file" in caplog.text

    def test_refresh(self, components_dir):
        """The index is built lazily and rebuilt on refresh."""
        loader = FileSystemLoader(components_dir)
        assert "new.component.html" not in loader.names()

        write(components_dir / "new.component.html", "<p>new</p>")
        assert "new.component.html" not in loader.names()

        loader.refresh()
        assert loader.load("new.component.html") == "<p>new</p>"


class TestPackageLoader:

    @pytest.fixture
    def package(self, tmp_path: Path, monkeypatch):
        """Importable package shipping components as data."""
        pkg = tmp_path / "beast_test_theme"
        write(pkg / "__init__.py", "")
        write(pkg / "components" / "button.component.html", "<button>{{ label }}</button>")
        write(pkg / "components" / "forms" / "field.component.html", "<input>")
        monkeypatch.syspath_prepend(str(tmp_path))
        return "beast_test_theme"

    def test_load(self, package):
        loader = PackageLoader(package)

        assert loader.load("button.component.html") == "<button>{{ label }}</button>"
        assert loader.names() == ["button.component.html", "field.component.html"]

    def test_missing(self, package):
        with pytest.raises(ComponentNotFoundError):
            PackageLoader(package).load("ghost.component.html")
