# minijwt/signing/hmac_signer.py
import hashlib
import hmac
from collections.abc import Callable
from enum import Enum

KeyedHash = Callable[[bytes, bytes], bytes]


def hmac_sha256(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha256).digest()


class Algorithm(str, Enum):
    """
    Signing algorithms a token can carry. HS256 is the only member; adding one
    means registering its keyed hash below and its header in tokens.jwt.
    """

    HS256 = "HS256"

    @property
    def keyed_hash(self) -> KeyedHash:
        return _KEYED_HASHES[self][0]

    @property
    def digest_size(self) -> int:
        return _KEYED_HASHES[self][1]


_KEYED_HASHES: dict[Algorithm, tuple[KeyedHash, int]] = {
    Algorithm.HS256: (hmac_sha256, hashlib.sha256().digest_size),
}


def signatures_match(expected: bytes, provided: bytes) -> bool:
    """
    Compare two signatures. A length mismatch fails immediately; equal-length
    inputs are always scanned in full, so the time taken does not depend on
    where the first differing byte sits.
    """
    if len(expected) != len(provided):
        return False
    return hmac.compare_digest(expected, provided)
