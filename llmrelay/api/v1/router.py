from fastapi import APIRouter

from llmrelay.api.v1.auth import router as auth_router
from llmrelay.api.v1.conversations import router as conversations_router
from llmrelay.api.v1.credentials import router as credentials_router
from llmrelay.api.v1.health import router as health_router
from llmrelay.api.v1.messages import router as messages_router
from llmrelay.api.v1.providers import router as providers_router
from llmrelay.api.v1.users import router as users_router

v1_router = APIRouter()

v1_router.include_router(messages_router, tags=["Messages"])
v1_router.include_router(conversations_router, tags=["Conversations"])
v1_router.include_router(providers_router, tags=["Providers"])
v1_router.include_router(credentials_router, tags=["User API Providers"])
v1_router.include_router(users_router, tags=["Users"])
v1_router.include_router(auth_router, tags=["Auth"])
v1_router.include_router(health_router, tags=["Health"])
