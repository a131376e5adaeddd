# n3gb/grid_systems/identifier.py
"""Binary codec for cell identifiers.

Layout (19 bytes, big-endian), URL-safe base64 without padding:

    [version u8][easting*1000 u64][northing*1000 u64][zoom u8][checksum u8]

The checksum is the mod-256 sum of the first 18 bytes. It detects corruption
only; it is not an integrity guarantee.
"""

import base64
import binascii
import math
import re
import struct

from ..abstractions.types import DecodedIdentifier
from ..exceptions import (
    Base64DecodeError,
    IdentifierRangeError,
    InvalidChecksum,
    InvalidIdentifierLength,
    UnsupportedVersion,
)
from .constants import IDENTIFIER_VERSION, SCALE_FACTOR
from .coordinate_index import round_half_up

IDENTIFIER_LENGTH = 19
_PAYLOAD = struct.Struct('>BQQB')
_MAX_U64 = 2 ** 64 - 1
_URLSAFE_ALPHABET = re.compile(r'^[A-Za-z0-9_-]*$')


def _checksum(data: bytes) -> int:
    return sum(data) & 0xFF


def _scale(value: float, axis: str) -> int:
    if not math.isfinite(value):
        raise IdentifierRangeError(f"{axis} must be finite, got {value}")
    scaled = round_half_up(value * SCALE_FACTOR)
    if scaled < 0 or scaled > _MAX_U64:
        raise IdentifierRangeError(
            f"{axis} {value} cannot be encoded (must be between 0 and {_MAX_U64 / SCALE_FACTOR})"
        )
    return scaled


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def encode_identifier(easting: float, northing: float, zoom: int) -> str:
    """
    Encode a cell centre and zoom level as an identifier string.

    Args:
        easting: Centre easting in metres
        northing: Centre northing in metres
        zoom: Zoom level (stored as one unsigned byte)

    Returns:
        26-character URL-safe base64 identifier

    Raises:
        IdentifierRangeError: If a coordinate is negative, non-finite or too
            large for an unsigned 64-bit field, or zoom does not fit a byte
    """
    if not 0 <= zoom <= 0xFF:
        raise IdentifierRangeError(f"Zoom level {zoom} does not fit in one byte")

    payload = _PAYLOAD.pack(
        IDENTIFIER_VERSION,
        _scale(easting, 'Easting'),
        _scale(northing, 'Northing'),
        int(zoom),
    )
    return _b64encode(payload + bytes([_checksum(payload)]))


def decode_identifier(identifier: str) -> DecodedIdentifier:
    """
    Decode an identifier string.

    Checks run in order: base64, length, checksum, version, so callers can tell
    corruption apart from version skew.

    Raises:
        Base64DecodeError: Not canonical unpadded URL-safe base64
        InvalidIdentifierLength: Payload is not 19 bytes
        InvalidChecksum: Stored checksum does not match the payload
        UnsupportedVersion: Version byte is not 1
    """
    if not isinstance(identifier, str) or not _URLSAFE_ALPHABET.match(identifier):
        raise Base64DecodeError(f"Identifier is not URL-safe base64: {identifier!r}")

    padded = identifier + '=' * (-len(identifier) % 4)
    try:
        data = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise Base64DecodeError(f"Failed to decode identifier {identifier!r}", e)

    # Reject non-canonical trailing bits
    if _b64encode(data) != identifier:
        raise Base64DecodeError(f"Identifier is not canonical base64: {identifier!r}")

    if len(data) != IDENTIFIER_LENGTH:
        raise InvalidIdentifierLength(len(data))

    payload, stored = data[:-1], data[-1]
    calculated = _checksum(payload)
    if calculated != stored:
        raise InvalidChecksum(calculated, stored)

    version, easting_int, northing_int, zoom = _PAYLOAD.unpack(payload)
    if version != IDENTIFIER_VERSION:
        raise UnsupportedVersion(version)

    return DecodedIdentifier(
        version=version,
        easting=easting_int / SCALE_FACTOR,
        northing=northing_int / SCALE_FACTOR,
        zoom=zoom,
    )
