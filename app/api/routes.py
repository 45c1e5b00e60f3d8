from fastapi import APIRouter
from app.api.routes_health import router as health_router
from app.api.routes_workflow import router as workflow_router
from app.api.routes_work_orders import router as work_orders_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(workflow_router, tags=["workflow"])
router.include_router(work_orders_router, tags=["work-orders"])
