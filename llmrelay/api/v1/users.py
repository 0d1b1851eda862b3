from fastapi import APIRouter, Depends

from llmrelay.dependencies import get_user_service
from llmrelay.schemas.users import UserCreate, UserResponse, UserUpdate
from llmrelay.services.users import UserService

router = APIRouter()


@router.get("/users")
async def list_users(service: UserService = Depends(get_user_service)) -> list[UserResponse]:
    return [UserResponse.from_user(u) for u in service.list_users()]


@router.post("/users", status_code=201)
async def create_user(
    body: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a user. The password is stored as a bcrypt hash."""
    return UserResponse.from_user(service.create_user(body))


@router.get("/users/{user_id}")
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> UserResponse:
    return UserResponse.from_user(service.get_user(user_id))


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.from_user(service.update_user(user_id, body))


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)) -> None:
    service.delete_user(user_id)
