"""
Compilation and caching of Jinja2 templates.
"""

import asyncio
import glob
import logging
import os

from jinja2 import Environment, FileSystemLoader, TemplateError

from .errors import TemplateCompileError


def template_name(file_path):
    """A template is registered under its file name without extension."""
    return os.path.splitext(os.path.basename(file_path))[0]


async def glob_path(pattern):
    """Return the files matching ``pattern`` in a stable order."""
    files = await asyncio.to_thread(glob.glob, pattern, recursive=True)
    files = sorted(f for f in files if os.path.isfile(f))
    logging.getLogger('Statist').debug(f"glob {pattern}: {files}")
    return files


def _read_source(file_path):
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()


class TemplateRegistry:
    """
    Compiles templates found on disk and keeps them by name.

    Each registry owns its own :class:`jinja2.Environment`, so filters and
    cached templates never leak between two builds. The environment's loader
    learns the directory of every compiled template, which lets templates
    ``extend`` or ``include`` their siblings by file name.
    """

    def __init__(self, filters=None, env=None):
        self.env = env or Environment(loader=FileSystemLoader([]))
        self.templates = {}
        self.logger = logging.getLogger('Statist.TemplateRegistry')
        for name, fn in (filters or {}).items():
            self.set_filter(name, fn)

    def set_filter(self, name, fn):
        """Make ``fn`` callable as ``{{ value|name }}`` inside templates."""
        self.logger.debug(f"Adding filter to template environment: {name}")
        self.env.filters[name] = fn

    def _add_search_path(self, directory):
        loader = self.env.loader
        if isinstance(loader, FileSystemLoader) and directory not in loader.searchpath:
            loader.searchpath.append(directory)

    def _compile(self, file_path, source):
        try:
            return self.env.from_string(source)
        except TemplateError as e:
            raise TemplateCompileError(file_path, e) from e

    async def compile(self, file_path):
        """Compile a single template file and return the template object."""
        try:
            source = await asyncio.to_thread(_read_source, file_path)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateCompileError(file_path, e) from e

        self._add_search_path(os.path.dirname(os.path.abspath(file_path)))
        template = self._compile(file_path, source)
        self.logger.debug(f"Compiled template: {file_path}")
        return template

    async def compile_all(self, pattern):
        """
        Compile every template matching ``pattern`` and cache it by name.

        All compilations run to completion. Successful ones are merged into
        the cache, later files winning over earlier ones with the same name.
        If any file failed, the first failure is raised afterwards.
        """
        files = await glob_path(pattern)
        results = await asyncio.gather(
            *(self.compile(f) for f in files), return_exceptions=True
        )

        compiled = {}
        failures = []
        for file_path, result in zip(files, results):
            if isinstance(result, BaseException):
                self.logger.error(f"Template error for {file_path}: {result}")
                failures.append(result)
                continue
            name = template_name(file_path)
            if name in compiled:
                self.logger.warning(f"Template name '{name}' is defined twice, using {file_path}")
            compiled[name] = result

        self.templates.update(compiled)

        if failures:
            raise failures[0]
        return compiled

    def get(self, name):
        """Return the cached template for ``name`` or ``None``."""
        return self.templates.get(name)

    def __contains__(self, name):
        return name in self.templates

    def __len__(self):
        return len(self.templates)
