from api.endpoints import calendar, photos, upload, viewer
from fastapi import APIRouter

api_router = APIRouter()
api_router.include_router(upload.router, prefix="/upload", tags=["Upload Daily Photo"])
api_router.include_router(photos.router, prefix="/photos", tags=["Photo Listing"])
api_router.include_router(viewer.router, prefix="/viewer", tags=["Photo Viewer"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
