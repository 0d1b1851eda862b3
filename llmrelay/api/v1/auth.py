from fastapi import APIRouter, Depends

from llmrelay.core.exceptions import AuthenticationError
from llmrelay.dependencies import get_user_service
from llmrelay.schemas.users import LoginRequest, LoginResponse
from llmrelay.services.users import UserService

router = APIRouter()


@router.post("/login")
async def login(body: LoginRequest, service: UserService = Depends(get_user_service)) -> LoginResponse:
    """Check a username/password pair and return the user id."""
    user_id = service.authenticate(body.username, body.password)
    if user_id is None:
        raise AuthenticationError("Invalid username or password.")
    return LoginResponse(user_id=user_id)
