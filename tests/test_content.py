"""Tests for front matter parsing and page loading."""

import os
from unittest.mock import Mock

import pytest

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from statist_pkg.content import Content, ContentLoader, content_path, parse_front_matter
from statist_pkg.errors import MalformedFrontMatterError, ReadError, RenderConversionError


class TestParseFrontMatter:
    """Test cases for parse_front_matter."""

    def test_attributes_and_body(self):
        attributes, body = parse_front_matter("---\ntitle: Hello\ntemplate: page\n---\n# Hi\n")
        assert attributes == {'title': 'Hello', 'template': 'page'}
        assert body == "# Hi\n"

    def test_no_front_matter(self):
        """Text without a header is all body."""
        attributes, body = parse_front_matter("# Just markdown\n")
        assert attributes == {}
        assert body == "# Just markdown\n"

    def test_empty_header(self):
        attributes, body = parse_front_matter("---\n---\nbody")
        assert attributes == {}
        assert body == "body"

    def test_dashes_inside_body_are_kept(self):
        attributes, body = parse_front_matter("---\ntitle: A\n---\nintro\n\n---\n\nmore\n")
        assert attributes == {'title': 'A'}
        assert body == "intro\n\n---\n\nmore\n"

    def test_windows_line_endings(self):
        attributes, body = parse_front_matter("---\r\ntitle: A\r\n---\r\nbody\r\n")
        assert attributes == {'title': 'A'}
        assert body == "body\r\n"

    def test_byte_order_mark(self):
        attributes, _ = parse_front_matter("\ufeff---\ntitle: A\n---\n")
        assert attributes == {'title': 'A'}

    def test_unterminated_header(self):
        """An opening delimiter without a closing one is an error."""
        with pytest.raises(MalformedFrontMatterError, match='not terminated') as exc_info:
            parse_front_matter("---\ntitle: Broken\n\n# Body\n", source='broken.md')
        assert exc_info.value.path == 'broken.md'

    def test_invalid_yaml(self):
        with pytest.raises(MalformedFrontMatterError, match='invalid YAML'):
            parse_front_matter("---\ntitle: [unclosed\n---\nbody\n")

    def test_header_must_be_mapping(self):
        with pytest.raises(MalformedFrontMatterError, match='mapping'):
            parse_front_matter("---\n- one\n- two\n---\nbody\n")


class TestContentPath:
    """Test cases for content_path."""

    def test_without_prefix(self):
        assert content_path(os.path.join('content', 'blog', 'first-post.md')) == 'first-post'

    def test_with_prefix(self):
        path = content_path(os.path.join('content', 'blog', 'first-post.md'), 'content')
        assert path == '/blog/first-post'

    def test_with_prefix_including_separator(self):
        path = content_path(os.path.join('content', 'blog', 'first-post.md'), 'content/')
        assert path == 'blog/first-post'

    def test_prefix_equal_to_directory(self):
        assert content_path(os.path.join('content', 'about.md'), 'content') == '/about'


class TestContentLoader:
    """Test cases for ContentLoader."""

    @pytest.mark.asyncio
    async def test_load_page(self, mock_content_dir):
        loader = ContentLoader()
        page = await loader.load(os.path.join(mock_content_dir, 'about.md'))

        assert isinstance(page, Content)
        assert page.attributes['title'] == 'About'
        assert page.attributes['template'] == 'page'
        assert page.attributes['order'] == 1
        assert '<h1>About Page</h1>' in page.body
        assert '<p>This is the about page.</p>' in page.body
        assert page.path == 'about'

    @pytest.mark.asyncio
    async def test_load_strips_prefix(self, mock_content_dir):
        loader = ContentLoader()
        page = await loader.load(os.path.join(mock_content_dir, 'blog', 'first-post.md'),
                                 strip_prefix=mock_content_dir + '/')
        assert page.path == 'blog/first-post'
        assert mock_content_dir not in page.path

    @pytest.mark.asyncio
    async def test_code_blocks_use_custom_renderer(self, temp_dir):
        source = os.path.join(temp_dir, 'code.md')
        with open(source, 'w', encoding='utf-8') as f:
            f.write("---\ntemplate: page\n---\n```\n<b>x</b>\n```\n")

        page = await ContentLoader().load(source)
        assert '<pre style="white-space: pre-wrap;"><code>' in page.body
        assert '&lt;b&gt;x&lt;/b&gt;' in page.body

    @pytest.mark.asyncio
    async def test_missing_file(self, temp_dir):
        missing = os.path.join(temp_dir, 'missing.md')
        with pytest.raises(ReadError) as exc_info:
            await ContentLoader().load(missing)
        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_malformed_front_matter(self, temp_dir):
        source = os.path.join(temp_dir, 'broken.md')
        with open(source, 'w', encoding='utf-8') as f:
            f.write("---\ntitle: Broken\n")

        with pytest.raises(MalformedFrontMatterError, match='broken.md'):
            await ContentLoader().load(source)

    @pytest.mark.asyncio
    async def test_conversion_failure(self, mock_content_dir):
        parser = Mock(side_effect=ValueError('bad markdown'))
        loader = ContentLoader(markdown_parser=parser)

        with pytest.raises(RenderConversionError, match='bad markdown'):
            await loader.load(os.path.join(mock_content_dir, 'about.md'))

    def test_markdown_filter(self):
        html = ContentLoader().markdown_filter('**bold** ~~gone~~')
        assert '<strong>bold</strong>' in html
        assert '<del>gone</del>' in html
