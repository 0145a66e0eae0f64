from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import EngineConfig, load_config, load_context_file
from .context import Context
from .engines import ENGINES, BeastEngine, create_engine
from .errors import BeastUserError
from .resolver import parse_literal
from .version import tool_version


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("BEAST_DEBUG") else logging.WARNING
    root = logging.getLogger("beast")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="beast",
        description="Directive-driven template renderer",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for render/component/list
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--engine", choices=sorted(ENGINES), default="html", help="engine flavour")
        sp.add_argument("--config", metavar="FILE", help="engine config (default: ./beast.yaml if present)")
        sp.add_argument("--components", metavar="DIR", help="components directory (overrides config)")
        sp.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    def add_context(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--context", metavar="FILE", help="YAML/JSON mapping of template variables")
        sp.add_argument(
            "--var",
            action="append",
            metavar="NAME=VALUE",
            help="template variable (repeatable); numbers and true/false are typed",
        )
        sp.add_argument("--locale", help="locale tag of the render")
        sp.add_argument("--path", help="current route path for bs:router")

    sp_render = sub.add_parser("render", help="render a template file to stdout")
    sp_render.add_argument("template", help="template file, or - for stdin")
    add_common(sp_render)
    add_context(sp_render)

    sp_component = sub.add_parser("component", help="render a named component to stdout")
    sp_component.add_argument("name", help="component name (without .component<ext>)")
    sp_component.add_argument("--static", action="store_true", help="render as a static component")
    add_common(sp_component)
    add_context(sp_component)

    sp_list = sub.add_parser("list", help="list available components")
    add_common(sp_list)

    return p


def _parse_vars(specs: Optional[List[str]]) -> Dict[str, Any]:
    """Parses NAME=VALUE pairs; literal values are typed."""
    result: Dict[str, Any] = {}
    for spec in specs or []:
        if "=" not in spec:
            raise ValueError(f"Invalid variable '{spec}'. Expected NAME=VALUE")
        name, value = spec.split("=", 1)
        literal = parse_literal(value.strip())
        result[name.strip()] = literal.value if literal.found else value
    return result


def _engine(ns: argparse.Namespace) -> BeastEngine:
    config: EngineConfig = load_config(ns.config) if ns.config else load_config()
    if ns.components:
        config.components_path = ns.components
        config.components_package = None
    return create_engine(ns.engine, config=config)


def _context(ns: argparse.Namespace, engine: BeastEngine) -> Context:
    bindings: Dict[str, Any] = {}
    if ns.context:
        bindings.update(load_context_file(ns.context))
    bindings.update(_parse_vars(ns.var))
    if ns.path is not None:
        bindings[engine.config.router_variable] = ns.path
    return Context(bindings, ns.locale or engine.config.default_locale)


def _read_template(arg: str) -> str:
    if arg == "-":
        return sys.stdin.read()
    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        engine = _engine(ns)

        if ns.cmd == "render":
            template = _read_template(ns.template)
            sys.stdout.write(engine.process(template, _context(ns, engine), ns.template))
            return 0

        if ns.cmd == "component":
            sys.stdout.write(engine.process_component(ns.name, _context(ns, engine), static=ns.static))
            return 0

        if ns.cmd == "list":
            for name in engine.list_components():
                sys.stdout.write(name + "\n")
            return 0

    except BeastUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
