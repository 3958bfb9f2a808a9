"""
Destination path resolution and output directory creation.

Links are logical page identifiers such as ``index``, ``blog/`` or
``blog/first-post``. They always use forward slashes and are mapped onto
``.html`` files below the configured ``dest`` directory.
"""

import asyncio
import logging
import os
import posixpath

from .errors import DirectoryCreateError, InvalidLinkError, SettingsError

logger = logging.getLogger('Statist')

HTML_EXT = '.html'


def _strip_html(name):
    """Return the basename without its ``.html`` suffix."""
    if name.endswith(HTML_EXT) and name != HTML_EXT:
        return name[:-len(HTML_EXT)]
    return name


def _relative_to_dest(dest, link):
    """Make a link that already points inside ``dest`` relative to it again."""
    norm_dest = os.path.normpath(dest)
    norm_link = os.path.normpath(link)
    if norm_dest != os.curdir and norm_link.startswith(norm_dest + os.sep):
        relative = os.path.relpath(norm_link, norm_dest).replace(os.sep, '/')
        if link.endswith('/'):
            relative += '/'
        return relative
    return link


def destination_path(settings, link):
    """
    Map a logical link to the output file it is written to.

    ``index`` -> ``<dest>/index.html``, ``foo/`` -> ``<dest>/foo/index.html``,
    ``foo/bar`` -> ``<dest>/foo/bar/index.html`` and ``foo/bar.html`` is kept
    as a file. Re-resolving a path this function returned yields the same path.
    """
    if not link:
        raise InvalidLinkError(link, 'link not defined')

    dest = settings.get('dest') if settings else None
    if not dest:
        raise SettingsError("Settings must define a non-empty 'dest' directory")

    link = _relative_to_dest(dest, link)

    if link == 'index':
        link += HTML_EXT

    if link.endswith('/'):
        link += 'index' + HTML_EXT

    if _strip_html(posixpath.basename(link)) == posixpath.basename(link):
        link += '/index' + HTML_EXT

    dirname = posixpath.dirname(link).lstrip('/')
    filename = _strip_html(posixpath.basename(link)) + HTML_EXT
    resolved = os.path.normpath(os.path.join(dest, *dirname.split('/'), filename))

    # Keep every page below the destination root
    abs_dest = os.path.abspath(dest)
    abs_resolved = os.path.abspath(resolved)
    if abs_resolved == abs_dest or os.path.commonpath([abs_dest, abs_resolved]) != abs_dest:
        raise InvalidLinkError(link, f'resolves outside of {dest}')

    return resolved


def _ancestors(directory):
    """List ``directory`` and its parents, outermost first."""
    chain = []
    current = directory
    while current and current not in chain:
        chain.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return list(reversed(chain))


def _make_dir(path):
    if os.path.isdir(path):
        return False
    try:
        os.mkdir(path)
    except FileExistsError:
        # Created by someone else since the check, or a file is in the way
        if not os.path.isdir(path):
            raise DirectoryCreateError(path, 'a file with that name already exists')
        return False
    except OSError as e:
        if os.path.isdir(path):
            return False
        raise DirectoryCreateError(path, e) from e
    return True


async def materialize_dir(directory):
    """
    Create ``directory`` one path segment at a time.

    Segments that already exist, or that a concurrent writer creates first,
    are skipped. Any other failure raises :class:`DirectoryCreateError`.
    """
    directory = os.path.normpath(directory)
    if await asyncio.to_thread(os.path.isdir, directory):
        return

    for prefix in _ancestors(directory):
        created = await asyncio.to_thread(_make_dir, prefix)
        if created:
            logger.debug(f"Created directory: {prefix}")


async def ensure_dir(path):
    """Make sure every ancestor directory of the file ``path`` exists."""
    directory = os.path.dirname(path)
    if directory:
        await materialize_dir(directory)
