"""Tests for the command-line interface."""

import logging
import os
from pathlib import Path

import pytest

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from statist_pkg.cli import build_parser, main


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI installs so each test logs to its own streams."""
    yield
    logger = logging.getLogger('Statist')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestCli:
    """Test cases for the statist command."""

    def test_parser_options(self):
        args = build_parser().parse_args(['--dest', 'public', '--strip-prefix', 'content/'])
        assert args.dest == 'public'
        assert args.strip_prefix == 'content/'
        assert args.content is None

    def test_init_creates_starter_site(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        main(['--init', 'yml'])

        assert os.path.exists(os.path.join(temp_dir, 'statist.yml'))
        assert os.path.exists(os.path.join(temp_dir, 'templates', 'page.html'))
        assert os.path.exists(os.path.join(temp_dir, 'content', 'index.md'))
        assert 'Created sample configuration file' in capsys.readouterr().out

    def test_init_then_build(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        main(['--init', 'yml'])
        main([])

        output = Path(temp_dir) / 'output' / 'index.html'
        html = output.read_text(encoding='utf-8')
        assert '<title>Welcome | My Static Site</title>' in html
        assert '<h1>Welcome to Your New Static Site</h1>' in html

    def test_build_with_arguments(self, temp_dir, monkeypatch, mock_content_dir, mock_templates_dir):
        monkeypatch.chdir(temp_dir)
        main([
            '--dest', 'public',
            '--content', 'content/**/*.md',
            '--templates', 'templates/*.html',
            '--strip-prefix', 'content',
        ])

        assert os.path.exists(os.path.join(temp_dir, 'public', 'index.html'))
        assert os.path.exists(os.path.join(temp_dir, 'public', 'about', 'index.html'))
        assert os.path.exists(os.path.join(temp_dir, 'public', 'blog', 'first-post', 'index.html'))

    def test_build_error_exits(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        content = Path(temp_dir) / 'content'
        content.mkdir()
        (content / 'orphan.md').write_text("---\ntitle: Orphan\n---\n")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert 'Missing template definition' in capsys.readouterr().err
