# minijwt/errors.py


class TokenError(Exception):
    """Base class for every error raised while handling HS256 tokens."""


class InvalidEncoding(TokenError, ValueError):
    """A Base64url segment contains a character outside the URL-safe alphabet."""


class MalformedToken(TokenError, ValueError):
    """The token does not contain the two '.' separators it needs."""


class InvalidSignature(TokenError):
    """Raised by verify_and_decode when the signature does not match."""
