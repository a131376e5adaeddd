"""Exceptions raised by the hex grid index."""

from typing import Optional


class N3gbError(Exception):
    """Base error for all grid index failures."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class InvalidZoomLevel(N3gbError, ValueError):
    """Raised when a zoom level is outside 0-15."""
    def __init__(self, zoom):
        super().__init__(f"Invalid zoom level: {zoom}")
        self.zoom = zoom


class IdentifierError(N3gbError):
    """Base error for cell identifier encoding/decoding."""
    pass


class InvalidIdentifierLength(IdentifierError):
    """Raised when a decoded identifier is not 19 bytes long."""
    def __init__(self, length: int):
        super().__init__(f"Invalid identifier length: {length} bytes")
        self.length = length


class InvalidChecksum(IdentifierError):
    """Raised when the identifier checksum does not match its payload."""
    def __init__(self, expected: int, actual: int):
        super().__init__(f"Invalid checksum: expected {expected}, found {actual}")
        self.expected = expected
        self.actual = actual


class UnsupportedVersion(IdentifierError):
    """Raised when the identifier carries an unknown version byte."""
    def __init__(self, version: int):
        super().__init__(f"Unsupported version: {version}")
        self.version = version


class Base64DecodeError(IdentifierError):
    """Raised when an identifier is not valid URL-safe base64."""
    pass


class IdentifierRangeError(IdentifierError, ValueError):
    """Raised when a coordinate cannot be scaled into an unsigned 64-bit field."""
    pass


class InvalidDimension(N3gbError, ValueError):
    """Raised when a hexagon sizing input is not positive."""
    pass


class ProjectionError(N3gbError):
    """Raised when a WGS84 <-> BNG transformation fails."""
    pass


class GeometryParseError(N3gbError):
    """Raised for malformed or unsupported geometry input."""
    pass


class GridConfigurationError(N3gbError):
    """Raised when a grid specification is missing its zoom or geometry source."""
    pass
