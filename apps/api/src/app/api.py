from fastapi import APIRouter

from app.modules.internship_applications import router as internship_applications_router

api_router = APIRouter()

api_router.include_router(internship_applications_router, tags=["Internship Applications"])
