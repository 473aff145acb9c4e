"""Exception types raised by gotry."""


class GotryError(Exception):
    """Base class for errors reported at the command line."""


class ParseError(GotryError):
    """The Go source could not be parsed."""

    def __init__(self, filename: str, line: int, column: int, msg: str):
        super().__init__(f"{filename}:{line}:{column}: {msg}")
        self.filename = filename
        self.line = line
        self.column = column


class ConfigError(GotryError):
    """Invalid configuration (bad YAML, bad ignore pattern)."""


class RewriteError(GotryError):
    """A rewrite was requested for a statement pair that is not a try candidate."""
