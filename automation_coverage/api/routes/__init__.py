from fastapi import APIRouter
from automation_coverage.api.routes import health, manual_page, jenkins, qtest

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router)
api_router.include_router(manual_page.router)
api_router.include_router(jenkins.router)
api_router.include_router(qtest.router)
