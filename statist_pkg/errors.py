"""
Exceptions raised by the Statist build pipeline.

Every error names the file, link or template that caused it so a failed
build can be traced back to its source.
"""


class StatistError(Exception):
    """Base class for all build errors."""


class SettingsError(StatistError, ValueError):
    """Raised when the build settings are missing or unusable."""


class InvalidLinkError(StatistError, ValueError):
    """Raised when a link is empty or resolves outside the destination root."""

    def __init__(self, link, reason=None):
        self.link = link
        message = f"Invalid link: {link!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class DirectoryCreateError(StatistError):
    """Raised when an output directory cannot be created."""

    def __init__(self, path, cause=None):
        self.path = path
        super().__init__(f"Failed to create directory {path}: {cause}")


class ReadError(StatistError):
    """Raised when a source file cannot be read."""

    def __init__(self, path, cause=None):
        self.path = path
        super().__init__(f"Failed to read {path}: {cause}")


class WriteError(StatistError):
    """Raised when a rendered page cannot be written."""

    def __init__(self, path, cause=None):
        self.path = path
        super().__init__(f"Failed to write {path}: {cause}")


class MalformedFrontMatterError(StatistError):
    """Raised when a front matter header is unterminated or not valid YAML."""

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Malformed front matter in {path}: {reason}")


class RenderConversionError(StatistError):
    """Raised when markdown cannot be converted to HTML."""

    def __init__(self, path, cause=None):
        self.path = path
        super().__init__(f"Failed to convert markdown in {path}: {cause}")


class TemplateCompileError(StatistError):
    """Raised when a template file fails to compile."""

    def __init__(self, path, cause=None):
        self.path = path
        super().__init__(f"Failed to compile template {path}: {cause}")


class TemplateNotFoundError(StatistError, LookupError):
    """Raised when no compiled template exists under the requested name."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unable to find precompiled template with name: {name}")


class MissingTemplateDeclarationError(StatistError):
    """Raised when a page does not declare a ``template`` in its front matter."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing template definition from page {path}")
