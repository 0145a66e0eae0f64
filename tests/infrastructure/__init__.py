"""
Shared test infrastructure for the template engine.

Modules:
- file_utils: Utilities for creating files and directories
- rendering_utils: Engine builders and one-shot rendering helpers
- cli_utils: Running the command line entry point
"""

from .file_utils import write, write_components
from .rendering_utils import html_components, text_components, make_engine, render_template
from .cli_utils import run_cli

__all__ = [
    # File utilities
    "write", "write_components",

    # Rendering utilities
    "html_components", "text_components", "make_engine", "render_template",

    # CLI utilities
    "run_cli",
]
