from fastapi import APIRouter

from .health import health_router
from .plan import plan_router, scheduled_payment_router
from .payment import payment_router, transaction_router
from .webhook import webhook_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(plan_router, tags=["Plans"])
router.include_router(scheduled_payment_router, tags=["Plans"])
router.include_router(payment_router, tags=["Payments"])
router.include_router(transaction_router, tags=["Payments"])
router.include_router(webhook_router, tags=["Webhooks"])
