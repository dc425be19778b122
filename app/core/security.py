from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from werkzeug.security import check_password_hash, generate_password_hash
from app.core.config import Settings
from app.schemas.auth_schemas import TokenData
import structlog

logger = structlog.get_logger()

# Missing or malformed headers are reported as 403 below, not by HTTPBearer
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Credential:
    """The single principal allowed to log in."""
    username: str
    password_hash: str

    @classmethod
    def from_plaintext(cls, username: str, password: str) -> "Credential":
        return cls(username=username, password_hash=hash_password(password))


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(
    username: str, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {"username": username, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def verify_token(token: str, settings: Settings) -> TokenData:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning("JWT validation error", error=str(e))
        raise _forbidden("Invalid or expired token")

    username = payload.get("username")
    if not username:
        logger.warning("JWT validation error", error="token missing username")
        raise _forbidden("Invalid or expired token")
    return TokenData(username=username)


def validate_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenData:
    if credentials is None or not credentials.credentials:
        logger.warning("Missing bearer token", path=request.url.path)
        raise _forbidden("Missing bearer token")

    user = verify_token(credentials.credentials, request.app.state.settings)
    request.state.user = user
    return user
