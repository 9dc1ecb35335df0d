"""
HTTP routes for the real-estate API, combined into one router.
"""

from fastapi import APIRouter

from realestate.routes import apartments, auth, buyers, floors, media, users

router = APIRouter()
for module in (auth, apartments, floors, buyers, users, media):
    router.include_router(module.router)
