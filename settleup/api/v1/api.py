from fastapi import APIRouter
from settleup.api.v1.endpoints import groups, members, views

api_router = APIRouter()

api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(views.router, prefix="/users", tags=["views"])
