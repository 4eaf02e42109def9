"""
Payment Routes - Stripe Connect onboarding for trainers, client payments
and subscriptions.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user, get_current_trainer, get_current_client
from models import PaymentIntentRequest, SubscriptionRequest
from models_orm import UserORM
from service_modules.payment_service import PaymentService, get_payment_service

router = APIRouter(tags=["Payments"])


# --- TRAINER ---

@router.post("/api/payments/trainer/connect/setup")
async def setup_connect_account(
    trainer: UserORM = Depends(get_current_trainer),
    service: PaymentService = Depends(get_payment_service)
):
    """Create the trainer's connected account and return the onboarding link."""
    return service.setup_connect_account(trainer)


@router.get("/api/payments/trainer/connect/status")
async def get_connect_status(
    trainer: UserORM = Depends(get_current_trainer),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_connect_status(trainer.id)


@router.get("/api/payments/trainer/history")
async def get_trainer_history(
    trainer: UserORM = Depends(get_current_trainer),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_trainer_history(trainer.id)


@router.get("/api/payments/trainer/subscriptions")
async def get_trainer_subscriptions(
    trainer: UserORM = Depends(get_current_trainer),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_subscriptions(trainer.id, as_trainer=True)


# --- CLIENT ---

@router.post("/api/payments/create-payment-intent")
async def create_payment_intent(
    data: PaymentIntentRequest,
    client: UserORM = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service)
):
    """One-time payment straight to the trainer's connected account."""
    return service.create_payment_intent(client, data)


@router.post("/api/payments/create-subscription")
async def create_subscription(
    data: SubscriptionRequest,
    client: UserORM = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service)
):
    return service.create_subscription(client, data)


@router.get("/api/payments/client/history")
async def get_client_history(
    client: UserORM = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_client_history(client.id)


@router.get("/api/payments/client/subscriptions")
async def get_client_subscriptions(
    client: UserORM = Depends(get_current_client),
    service: PaymentService = Depends(get_payment_service)
):
    return service.get_subscriptions(client.id)


# --- EITHER PARTY ---

@router.post("/api/payments/subscriptions/{subscription_id}/cancel")
async def cancel_subscription(
    subscription_id: str,
    user: UserORM = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    return service.cancel_subscription(user.id, subscription_id)


@router.post("/api/payments/payments/{payment_id}/confirm")
async def confirm_payment(
    payment_id: str,
    user: UserORM = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    """Mark a payment completed once the client-side confirmation succeeded."""
    return service.confirm_payment(user.id, payment_id)
