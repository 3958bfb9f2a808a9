"""
Rendering of pages through named templates.
"""

import logging

from .errors import MissingTemplateDeclarationError, TemplateNotFoundError


class Renderer:
    """
    Renders templates from a :class:`TemplateRegistry`.

    The context handed to a template is layered: the site data first, the
    caller's context over it, and finally ``page`` set to the page
    attributes. Caller mappings are never modified.
    """

    def __init__(self, registry, site=None):
        self.registry = registry
        self.site = site if site is not None else {}
        self.logger = logging.getLogger('Statist')

    def template_context(self, page, context=None):
        """Build the effective render context for one call."""
        effective = dict(self.site)
        effective.update(context or {})
        effective['page'] = page
        return effective

    def render(self, name, page, context=None, template=None):
        """Render ``template``, or the registered template ``name``, for ``page``."""
        if template is None:
            template = self.registry.get(name)
        if template is None:
            raise TemplateNotFoundError(name)

        self.logger.debug(f"Rendering template: {name}")
        return template.render(self.template_context(page, context))

    def compile_front_matter_markdown_page(self, path, page, context=None):
        """
        Render a loaded page through the template its front matter names.

        ``path`` is only used to identify the page in errors. The page body is
        exposed to the template as ``content``.
        """
        template = page.attributes.get('template')
        if not template:
            raise MissingTemplateDeclarationError(path)

        context = dict(context or {})
        context['content'] = page.body
        return self.render(template, page.attributes, context)
