"""
Exception types raised by the viewport core and its collaborators.
"""


class ViewportError(Exception):
    """Base class for all modelviewport errors."""


class InvalidGeometryError(ViewportError, ValueError):
    """A bounding volume is non-finite or inverted and cannot be normalized or framed."""


class ParserConfigurationError(ViewportError, RuntimeError):
    """The parser collaborator was used before its runtime path was configured."""


class UnsupportedFormatError(ViewportError, ValueError):
    """No model format or parser is known for a reference."""
