import asyncio
import logging
import os
from collections.abc import Mapping
from datetime import datetime

from .content import ContentLoader
from .errors import SettingsError, WriteError
from .paths import destination_path, ensure_dir
from .rendering import Renderer
from .templates import TemplateRegistry, glob_path


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Starting site build",
            "Site build completed in",
            "Total templates compiled:",
            "Total pages loaded:",
            "Total pages generated:",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(log_dir=None, verbose=False):
    """Set up logging configuration."""
    logger = logging.getLogger('Statist')
    logger.setLevel(logging.DEBUG if (verbose or log_dir) else logging.INFO)

    if not logger.handlers:
        # Console handler with filter
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        # File handler for all logs
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('statist_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            logger.addHandler(file_handler)

    return logger


def page_link(page):
    """
    The link a page is written to.

    An explicit ``link`` attribute wins. Otherwise the content path is used,
    with an ``index`` page standing for its directory: ``/index`` becomes
    ``index`` and ``/blog/index`` becomes ``/blog/``.
    """
    link = page.attributes.get('link')
    if link:
        return link
    directory, _, name = page.path.rpartition('/')
    if name == 'index':
        return directory + '/' if directory else 'index'
    return page.path


def _write_text(path, content):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


class Statist:
    """
    One site build: template registry, page loading, rendering and output.

    :param site: data exposed to every template, overridden by call context.
    :param settings: mapping with at least ``dest``, the output directory.
    :param options: may hold ``filters``, a mapping of name to callable that
        becomes available inside templates.
    """

    def __init__(self, site=None, settings=None, options=None):
        options = options or {}
        self.site = site if site is not None else {}
        self.settings = dict(settings or {})
        self.logger = logging.getLogger('Statist')

        if not self.settings.get('dest'):
            raise SettingsError("Settings must define a non-empty 'dest' directory")

        self.loader = ContentLoader()
        self.registry = TemplateRegistry(filters={'markdown': self.loader.markdown_filter})
        self.templates = self.registry.templates
        self.renderer = Renderer(self.registry, self.site)
        self.pages_generated = 0

        filters = options.get('filters')
        if filters is not None:
            if not isinstance(filters, Mapping):
                raise SettingsError(f"options['filters'] must be a mapping, got {type(filters).__name__}")
            for name, fn in filters.items():
                self.registry.set_filter(name, fn)

    async def compile_templates(self, pattern):
        """Compile all templates matching ``pattern`` into the registry."""
        return await self.registry.compile_all(pattern)

    async def compile_template(self, file_path):
        return await self.registry.compile(file_path)

    async def write_file(self, link, content):
        """Write ``content`` to the destination of ``link`` and return that path."""
        output_path = destination_path(self.settings, link)
        self.logger.debug(f"Writing page: {output_path}")

        await ensure_dir(output_path)
        try:
            await asyncio.to_thread(_write_text, output_path, content)
        except OSError as e:
            self.logger.error(f"Failed to write HTML file {output_path}: {e}")
            raise WriteError(output_path, e) from e

        self.logger.debug(f"Page written: {output_path} ({link})")
        return output_path

    async def read_front_matter_markdown_page(self, file_path, strip_prefix=None):
        return await self.loader.load(file_path, strip_prefix)

    async def read_front_matter_markdown_pages(self, pattern, strip_prefix=None):
        """
        Load every markdown page matching ``pattern``.

        Returns a mapping of source file path to :class:`Content`. Every load
        is allowed to finish; if any of them failed the first error is raised
        and no mapping is returned.
        """
        files = await glob_path(pattern)
        for f in files:
            self.logger.debug(f"Mapping front matter page: {f}")

        results = await asyncio.gather(
            *(self.read_front_matter_markdown_page(f, strip_prefix) for f in files),
            return_exceptions=True
        )

        pages = {}
        failures = []
        for file_path, result in zip(files, results):
            if isinstance(result, BaseException):
                self.logger.error(f"Error processing {file_path}: {result}")
                failures.append(result)
            else:
                pages[file_path] = result

        if failures:
            raise failures[0]
        return pages

    def compile_front_matter_markdown_page(self, path, page, context=None):
        return self.renderer.compile_front_matter_markdown_page(path, page, context)

    def render_template(self, name, page, context=None, template=None):
        return self.renderer.render(name, page, context, template)

    def get_default_template_context(self, page, context=None):
        return self.renderer.template_context(page, context)

    async def build(self, content_pattern, templates_pattern, strip_prefix=None, context=None):
        """
        Compile templates, load pages, render and write every page.

        Each page is written to :func:`page_link`. When several pages resolve
        to the same file the last one in source order is kept. Returns a
        mapping of link to written file.
        """
        self.logger.info("Starting site build...")

        compiled = await self.compile_templates(templates_pattern)
        self.logger.info(f"Total templates compiled: {len(compiled)}")

        pages = await self.read_front_matter_markdown_pages(content_pattern, strip_prefix)
        self.logger.info(f"Total pages loaded: {len(pages)}")

        base_context = {'pages': list(pages.values())}
        base_context.update(context or {})

        # Keyed by output file so two links for one file are written once
        rendered = {}
        for source, page in pages.items():
            link = page_link(page)
            output_path = destination_path(self.settings, link)
            if output_path in rendered:
                previous = rendered[output_path][0]
                self.logger.warning(
                    f"Links '{previous}' and '{link}' both write {output_path}, using {source}"
                )
            rendered[output_path] = (link, self.compile_front_matter_markdown_page(source, page, base_context))

        links = [link for link, _ in rendered.values()]
        results = await asyncio.gather(
            *(self.write_file(link, html) for link, html in rendered.values()),
            return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        self.pages_generated += len(links)
        self.logger.info(f"Total pages generated: {len(links)}")
        return dict(zip(links, results))


def init(site=None, settings=None, options=None):
    """Create a :class:`Statist` for one build."""
    return Statist(site, settings, options)
