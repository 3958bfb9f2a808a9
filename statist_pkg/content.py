"""
Loading of markdown pages with YAML front matter.
"""

import asyncio
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import mistune
import yaml

from .errors import MalformedFrontMatterError, ReadError, RenderConversionError

FRONT_MATTER_DELIMITER = '---'

# Closing delimiter on a line of its own; "..." is the YAML document end marker
_CLOSING_RE = re.compile(r'^(?:---|\.\.\.)[ \t]*\r?$', re.MULTILINE)


@dataclass
class Content:
    """A page read from disk: front matter, HTML body and lookup path."""
    attributes: Dict[str, Any] = field(default_factory=dict)
    body: str = ''
    path: Optional[str] = None


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    class CustomRenderer(mistune.HTMLRenderer):
        def __init__(self):
            super().__init__(escape=False)

        def block_code(self, code, info=None):
            escaped_code = mistune.escape(code)
            return '<pre style="white-space: pre-wrap;"><code>{}</code></pre>'.format(escaped_code)

    return mistune.create_markdown(
        renderer=CustomRenderer(),
        plugins=['table', 'task_lists', 'strikethrough']
    )


def parse_front_matter(text, source='<string>') -> Tuple[Dict[str, Any], str]:
    """
    Split ``text`` into its YAML front matter and the remaining body.

    Text without a leading ``---`` line has no attributes. An opening
    delimiter that is never closed, invalid YAML, or YAML that is not a
    mapping raises :class:`MalformedFrontMatterError`.
    """
    if text.startswith('\ufeff'):
        text = text[1:]

    lines = text.split('\n', 1)
    if lines[0].rstrip() != FRONT_MATTER_DELIMITER:
        return {}, text

    rest = lines[1] if len(lines) > 1 else ''
    closing = _CLOSING_RE.search(rest)
    if closing is None:
        raise MalformedFrontMatterError(source, 'front matter block is not terminated')

    header = rest[:closing.start()]
    body = rest[closing.end():]
    if body.startswith('\r\n'):
        body = body[2:]
    elif body.startswith('\n'):
        body = body[1:]

    try:
        attributes = yaml.safe_load(header)
    except yaml.YAMLError as e:
        raise MalformedFrontMatterError(source, f'invalid YAML: {e}') from e

    if attributes is None:
        attributes = {}
    if not isinstance(attributes, dict):
        raise MalformedFrontMatterError(
            source, f'expected a mapping, got {type(attributes).__name__}'
        )

    return attributes, body


def content_path(file_path, strip_prefix=None):
    """
    Compute the lookup path of a page from its file path.

    Without ``strip_prefix`` this is the bare file name without extension.
    With it, the prefix is removed from the directory part and the result is
    ``<dir>/<name>``, always joined with forward slashes.
    """
    dirname = os.path.dirname(file_path).replace(os.sep, '/')
    basename = os.path.splitext(os.path.basename(file_path))[0]
    if strip_prefix:
        dirname = dirname.replace(strip_prefix.replace(os.sep, '/'), '', 1)
        return f"{dirname}/{basename}"
    return basename


def _read_text(file_path, encoding):
    with open(file_path, 'r', encoding=encoding) as f:
        return f.read()


class ContentLoader:
    """Reads markdown pages and turns them into :class:`Content` records."""

    def __init__(self, markdown_parser=None, encoding='utf-8'):
        self.encoding = encoding
        self.markdown_parser = markdown_parser or create_markdown_parser()
        self.logger = logging.getLogger('Statist.ContentLoader')

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    async def read(self, file_path):
        """Read a source file as text."""
        try:
            return await asyncio.to_thread(_read_text, file_path, self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Failed to read markdown file {file_path}: {e}")
            raise ReadError(file_path, e) from e

    def convert(self, file_path, text):
        try:
            return self.markdown_filter(text)
        except Exception as e:
            self.logger.error(f"Failed to convert markdown in {file_path}: {e}")
            raise RenderConversionError(file_path, e) from e

    async def load(self, file_path, strip_prefix=None) -> Content:
        """Read ``file_path`` and return its front matter, HTML body and path."""
        text = await self.read(file_path)

        attributes, body = parse_front_matter(text, source=file_path)
        self.logger.debug(f"Front matter for {file_path}: {attributes}")

        page = Content(attributes=attributes, body=body)
        page.body = self.convert(file_path, page.body)
        page.path = content_path(file_path, strip_prefix)
        return page
