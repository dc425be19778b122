import hmac
from fastapi import HTTPException, status
from app.core.config import Settings
from app.core.security import Credential, create_access_token, verify_password
import structlog

logger = structlog.get_logger()


class AuthService:
    def __init__(self, credential: Credential, settings: Settings):
        self.credential = credential
        self.settings = settings

    def login(self, username: str, password: str) -> str:
        # Check both halves even when the first fails so both failures look alike
        username_ok = hmac.compare_digest(
            username.encode("utf-8"), self.credential.username.encode("utf-8")
        )
        password_ok = verify_password(password, self.credential.password_hash)
        if not (username_ok and password_ok):
            logger.warning("Login failed", username=username)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        token = create_access_token(username, self.settings)
        logger.info("Login succeeded", username=username)
        return token
