from fastapi import APIRouter
from .routes import rounds, feed, tiers

api_router = APIRouter()

api_router.include_router(rounds.router, prefix="/rounds", tags=["rounds"])
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
api_router.include_router(tiers.router, prefix="/tiers", tags=["tiers"])
