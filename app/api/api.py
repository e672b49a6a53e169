from fastapi import APIRouter
from app.api.v1 import appointments, doctors

api_router = APIRouter()

api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
