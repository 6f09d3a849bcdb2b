# minijwt/tokens/jwt.py
"""
Compact HS256 tokens: ``base64url(header).base64url(payload).base64url(signature)``.

The payload is an opaque byte string; nothing here parses it. The header is
written as a fixed constant and is never read back on verification: only the
``header.payload`` text as received is re-signed and compared.
"""
import json
import logging
from typing import NamedTuple

from minijwt.codec import base64url
from minijwt.errors import InvalidEncoding, InvalidSignature, MalformedToken
from minijwt.signing.hmac_signer import Algorithm, signatures_match

log = logging.getLogger(__name__)


def _header_json(algorithm: Algorithm) -> bytes:
    return json.dumps({"alg": algorithm.value, "typ": "JWT"}, separators=(",", ":")).encode()


_HEADERS: dict[Algorithm, bytes] = {alg: _header_json(alg) for alg in Algorithm}

HEADER_JSON = _HEADERS[Algorithm.HS256]  # b'{"alg":"HS256","typ":"JWT"}'


class TokenSegments(NamedTuple):
    signing_input: str
    header: str
    payload: str
    signature: str


def split_token(token: str) -> TokenSegments:
    first = token.find(".")
    if first < 0:
        raise MalformedToken("token has no header separator")
    second = token.find(".", first + 1)
    if second < 0:
        raise MalformedToken("token has no payload separator")
    return TokenSegments(
        signing_input=token[:second],
        header=token[:first],
        payload=token[first + 1 : second],
        signature=token[second + 1 :],
    )


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode(payload: bytes | str, secret: bytes | str, algorithm: Algorithm = Algorithm.HS256) -> str:
    """
    Sign ``payload`` with ``secret`` and return the token text.

    ``str`` arguments are UTF-8 encoded. Errors from the keyed hash propagate
    unchanged.
    """
    header_b64 = base64url.encode(_HEADERS[algorithm])
    payload_b64 = base64url.encode(_as_bytes(payload))
    signing_input = f"{header_b64}.{payload_b64}"
    signature = algorithm.keyed_hash(_as_bytes(secret), signing_input.encode("ascii"))
    return f"{signing_input}.{base64url.encode(signature)}"


sign = encode


def verify(token: str, secret: bytes | str, algorithm: Algorithm = Algorithm.HS256) -> bool:
    """
    Return True only if ``token`` carries a valid signature for ``secret``.

    Never raises on bad input: non-ASCII text, a missing separator, a signature
    segment that is not Base64url and a plain mismatch all come back as False.
    """
    if not isinstance(token, str) or not token.isascii():
        log.debug("token rejected: not an ASCII string")
        return False
    try:
        segments = split_token(token)
    except MalformedToken as e:
        log.debug(f"token rejected: {e}")
        return False

    expected = algorithm.keyed_hash(_as_bytes(secret), segments.signing_input.encode("ascii"))

    try:
        provided = base64url.decode(segments.signature)
    except InvalidEncoding:
        log.debug("token rejected: signature segment is not base64url")
        return False
    if len(provided) != algorithm.digest_size:
        log.debug("token rejected: signature has the wrong length")
        return False

    return signatures_match(expected, provided)


def decode_without_verify(token: str) -> bytes:
    """
    Return the raw payload bytes WITHOUT checking the signature.

    Anyone can forge a token that decodes here. Use this for inspection or
    logging only, never for trust decisions; call ``verify`` or
    ``verify_and_decode`` for that.

    Raises:
        MalformedToken: the token does not have two '.' separators.
        InvalidEncoding: the payload segment is not valid Base64url.
    """
    segments = split_token(token)
    return base64url.decode(segments.payload)


def verify_and_decode(token: str, secret: bytes | str, algorithm: Algorithm = Algorithm.HS256) -> bytes:
    if not verify(token, secret, algorithm):
        raise InvalidSignature("signature verification failed")
    return decode_without_verify(token)
