"""
Statist - a minimal static site build pipeline.

Statist discovers markdown pages with YAML front matter, renders each one
through the Jinja2 template its front matter names, and writes the result
to an ``.html`` file derived from the page's link.
"""

__version__ = "1.0.0"

from .content import Content, ContentLoader
from .core import Statist, init
from .paths import destination_path, ensure_dir
from .rendering import Renderer
from .templates import TemplateRegistry

__all__ = [
    'Content', 'ContentLoader', 'Renderer', 'Statist', 'TemplateRegistry',
    'destination_path', 'ensure_dir', 'init',
]
