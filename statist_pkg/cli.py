#!/usr/bin/env python3
"""
Command-line interface for Statist - static site build pipeline.
"""

import os
import sys
import argparse
import asyncio
import time
from typing import List, Optional

from . import __version__
from .core import Statist, setup_logging
from .errors import StatistError
from .settings import StatistSettings

SAMPLE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ page.title }} | {{ title }}</title>
</head>
<body>
    <main>
        <h1>{{ page.title }}</h1>
        {{ content|safe }}
    </main>
</body>
</html>
"""

SAMPLE_PAGE = """---
title: Welcome
template: page
link: index
---

# Welcome to Your New Static Site

This page was rendered from `content/index.md` through `templates/page.html`.
"""


def create_starter_structure(base_dir: Optional[str] = None) -> None:
    """Create a starter structure with one template and one page."""
    current_dir = base_dir or os.getcwd()

    starter_files = {
        os.path.join('templates', 'page.html'): SAMPLE_TEMPLATE,
        os.path.join('content', 'index.md'): SAMPLE_PAGE,
    }

    for relative_path, body in starter_files.items():
        full_path = os.path.join(current_dir, relative_path)
        if os.path.exists(full_path):
            print(f"File already exists: {relative_path}")
            continue
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, 'w', encoding='utf-8') as f:
            f.write(body)
        print(f"Created: {relative_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Statist - Static Site Build Pipeline')
    parser.add_argument('--dest', type=str,
                        help='Output directory for rendered pages')
    parser.add_argument('--content', type=str,
                        help='Glob pattern matching markdown pages')
    parser.add_argument('--templates', type=str,
                        help='Glob pattern matching templates')
    parser.add_argument('--strip-prefix', dest='strip_prefix', type=str,
                        help='Prefix removed from page directories when building links')
    parser.add_argument('--log-dir', dest='log_dir', type=str,
                        help='Directory for detailed build logs')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug output on the console')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter files')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = StatistSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")

        print("\nCreating starter project structure...")
        create_starter_structure()
        print("\nEdit the configuration file and templates, then run 'statist' to build your site.")
        return

    try:
        # Load settings from configuration file
        settings_loader = StatistSettings()
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items() if v is not None}
        final_settings = settings_loader.merge_with_args(args_dict)

        dest = final_settings['dest']
        if dest and dest.startswith('~/'):
            dest = os.path.expanduser(dest)

        logger = setup_logging(final_settings['log_dir'], verbose=args.verbose)
        overall_start_time = time.time()

        generator = Statist(final_settings['site'], {'dest': dest})
        asyncio.run(generator.build(
            final_settings['content'],
            final_settings['templates'],
            strip_prefix=final_settings['strip_prefix'],
        ))

        total_time = time.time() - overall_start_time
        logger.info(f"Site build completed in {total_time:.6f} seconds.")
    except StatistError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
