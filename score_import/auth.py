from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from score_import.config import settings
from score_import.exceptions import UnauthorizedError
from score_import.imports.schemas import ImportUser

_bearer = HTTPBearer()


def issue_token(user: ImportUser) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {"sub": user.username, "uid": user.id, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def verify_token(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer),  # noqa: B008
) -> dict:
    try:
        return jwt.decode(credentials.credentials, settings.jwt_secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token") from None


async def get_current_user(payload: dict = Depends(verify_token)) -> ImportUser:  # noqa: B008
    try:
        return ImportUser(id=payload["uid"], username=payload["sub"])
    except (KeyError, ValueError):
        raise UnauthorizedError("Token does not identify a user") from None
