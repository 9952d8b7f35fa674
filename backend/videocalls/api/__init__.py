from fastapi import APIRouter
from videocalls.api import calls

router = APIRouter()

router.include_router(calls.router)
