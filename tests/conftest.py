"""Test configuration and fixtures for Statist tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a mock content directory structure."""
    content_dir = Path(temp_dir) / 'content'
    blog_dir = content_dir / 'blog'
    blog_dir.mkdir(parents=True)

    index_page = content_dir / 'index.md'
    index_page.write_text("""---
title: Home
template: page
link: index
---

# Welcome

This is the home page.
""")

    about_page = content_dir / 'about.md'
    about_page.write_text("""---
title: About
template: page
order: 1
---

# About Page

This is the about page.
""")

    sample_post = blog_dir / 'first-post.md'
    sample_post.write_text("""---
title: Test Post
template: post
author: John Doe
date: 2023-01-01
---

# Test Post

This is a test post with some content.
""")

    return str(content_dir)


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a mock templates directory."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    # Create base template
    base_template = templates_dir / 'base.html'
    base_template.write_text("""<!DOCTYPE html>
<html>
<head>
    <title>{{ page.title }} | {{ title }}</title>
</head>
<body>
    {% block content %}{% endblock %}
</body>
</html>""")

    # Create post template
    post_template = templates_dir / 'post.html'
    post_template.write_text("""{% extends "base.html" %}
{% block content %}
<article>
    <h1>{{ page.title }}</h1>
    <p class="author">{{ page.author }}</p>
    <div>{{ content|safe }}</div>
</article>
{% endblock %}""")

    # Create page template
    page_template = templates_dir / 'page.html'
    page_template.write_text("""{% extends "base.html" %}
{% block content %}
<div>
    <h1>{{ page.title }}</h1>
    <div>{{ content|safe }}</div>
</div>
{% endblock %}""")

    return str(templates_dir)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Path of a not yet existing output directory."""
    return os.path.join(temp_dir, 'output')


@pytest.fixture
def settings(mock_output_dir):
    """Build settings pointing at the mock output directory."""
    return {'dest': mock_output_dir}
