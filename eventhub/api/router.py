from fastapi import APIRouter

from eventhub.api.auth import router as auth_router
from eventhub.api.events import router as events_router
from eventhub.api.password import router as password_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(password_router)
router.include_router(events_router)
