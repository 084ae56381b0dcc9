from fastapi import APIRouter
from pydantic import BaseModel

from score_import.auth import issue_token
from score_import.config import settings
from score_import.exceptions import UnauthorizedError
from score_import.imports.schemas import ImportUser

router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest) -> TokenResponse:
    if data.username != settings.auth_username or data.password != settings.auth_password:
        raise UnauthorizedError("Invalid credentials")

    user = ImportUser(id=settings.auth_user_id, username=settings.auth_username)
    return TokenResponse(access_token=issue_token(user))
