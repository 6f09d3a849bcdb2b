# minijwt/codec/base64url.py
"""
Base64url (RFC 4648 section 5) without padding.

Decoding is strict: '=', whitespace and anything else outside the
64-symbol alphabet raise InvalidEncoding. Leftover bits at the end of the
input are dropped, as with standard Base64.
"""
from minijwt.errors import InvalidEncoding

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

_VALUES: dict[str, int] = {char: index for index, char in enumerate(ALPHABET)}

# chars emitted for a trailing group of 0, 1 or 2 bytes
_TAIL_CHARS = (0, 2, 3)


def encoded_length(size: int) -> int:
    """Length of ``encode(data)`` for ``len(data) == size``."""
    return 4 * (size // 3) + _TAIL_CHARS[size % 3]


def encode(data: bytes) -> str:
    out: list[str] = []
    size = len(data)
    full = size - size % 3

    for i in range(0, full, 3):
        n = (data[i] << 16) | (data[i + 1] << 8) | data[i + 2]
        out.append(ALPHABET[(n >> 18) & 63])
        out.append(ALPHABET[(n >> 12) & 63])
        out.append(ALPHABET[(n >> 6) & 63])
        out.append(ALPHABET[n & 63])

    rem = size - full
    if rem == 1:
        n = data[full] << 16
        out.append(ALPHABET[(n >> 18) & 63])
        out.append(ALPHABET[(n >> 12) & 63])
    elif rem == 2:
        n = (data[full] << 16) | (data[full + 1] << 8)
        out.append(ALPHABET[(n >> 18) & 63])
        out.append(ALPHABET[(n >> 12) & 63])
        out.append(ALPHABET[(n >> 6) & 63])

    return "".join(out)


def decode(text: str) -> bytes:
    out = bytearray()
    buffer = 0
    bits = 0

    for position, char in enumerate(text):
        value = _VALUES.get(char)
        if value is None:
            raise InvalidEncoding(f"invalid base64url character {char!r} at position {position}")

        buffer = (buffer << 6) | value
        bits += 6
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1

    return bytes(out)
