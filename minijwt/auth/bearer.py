# minijwt/auth/bearer.py
import logging

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from minijwt.config import Settings, get_settings
from minijwt.errors import TokenError
from minijwt.tokens import jwt

log = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def require_secret(settings: Settings = Depends(get_settings)) -> bytes:
    if settings.JWT_SECRET is None or not settings.JWT_SECRET.get_secret_value():
        raise HTTPException(status_code=500, detail="Server misconfigured: JWT_SECRET not set")
    return settings.JWT_SECRET.get_secret_value().encode("utf-8")


def get_verified_payload(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    secret: bytes = Depends(require_secret),
) -> bytes:
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Authorization header"
        )

    try:
        return jwt.verify_and_decode(credentials.credentials, secret)
    except TokenError as e:
        log.warning(f"Bearer token rejected: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from e
