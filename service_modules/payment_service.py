"""
Payment Service - Stripe Connect payouts straight to the trainer.

Clients pay trainers directly (no platform fee). Without a real
STRIPE_SECRET_KEY the service runs in test mode and fabricates test_*
identifiers instead of calling Stripe.
"""
import os
from typing import List

import stripe

from .base import (
    HTTPException, uuid, logging, datetime, timedelta,
    get_db_session, UserORM,
    to_dict, now_iso
)
from models_orm import TrainerStripeAccountORM, PaymentORM, SubscriptionORM
from models import PaymentIntentRequest, SubscriptionRequest

# Configure Stripe
stripe.api_key = os.environ.get("STRIPE_SECRET_KEY")

logger = logging.getLogger("trainr")

BILLING_INTERVALS = {"weekly": "week", "monthly": "month", "yearly": "year"}
TEST_PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}


def is_stripe_configured():
    """Check if Stripe API key is configured (not a placeholder)."""
    api_key = os.environ.get("STRIPE_SECRET_KEY")
    return bool(api_key) and not api_key.startswith("your_") and len(api_key) > 20


def frontend_url() -> str:
    return os.environ.get("FRONTEND_URL", "http://localhost:3000").rstrip("/")


def to_cents(amount: float) -> int:
    return int(round(float(amount) * 100))


def _test_id(prefix: str) -> str:
    return f"test_{prefix}_{uuid.uuid4().hex[:8]}"


class PaymentService:
    """Service for trainer payouts, one-time payments and subscriptions."""

    def _get_connect_account_id(self, db, trainer_id: str):
        account = db.query(TrainerStripeAccountORM).filter(
            TrainerStripeAccountORM.trainer_id == trainer_id
        ).first()
        return account.stripe_account_id if account else None

    # --- STRIPE CONNECT ---

    def setup_connect_account(self, trainer: UserORM) -> dict:
        """Create an Express account for the trainer and return its onboarding link."""
        db = get_db_session()
        try:
            if self._get_connect_account_id(db, trainer.id):
                raise HTTPException(status_code=400, detail="Stripe account already connected")

            refresh_url = f"{frontend_url()}/profile?stripe_refresh=true"
            return_url = f"{frontend_url()}/profile?stripe_success=true"

            if is_stripe_configured():
                account = stripe.Account.create(
                    type="express",
                    country="US",
                    email=trainer.email,
                    capabilities={
                        "card_payments": {"requested": True},
                        "transfers": {"requested": True},
                    },
                    metadata={"trainer_id": trainer.id}
                )
                account_id = account.id
                account_link = stripe.AccountLink.create(
                    account=account_id,
                    refresh_url=refresh_url,
                    return_url=return_url,
                    type="account_onboarding"
                )
                onboarding_url = account_link.url
            else:
                account_id = _test_id("acct")
                onboarding_url = return_url

            db.add(TrainerStripeAccountORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer.id,
                stripe_account_id=account_id,
                stripe_account_type="express",
                onboarding_completed=not is_stripe_configured(),
                charges_enabled=not is_stripe_configured(),
                payouts_enabled=not is_stripe_configured(),
                created_at=now_iso()
            ))
            db.commit()
            logger.info(f"Created Stripe Connect account for trainer {trainer.id}: {account_id}")

            return {"accountId": account_id, "onboardingUrl": onboarding_url}

        except HTTPException:
            raise
        except stripe.StripeError as e:
            db.rollback()
            logger.error(f"Stripe error creating Connect account: {e}")
            raise HTTPException(status_code=400, detail=f"Stripe error: {str(e)}")
        finally:
            db.close()

    def get_connect_status(self, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            account = db.query(TrainerStripeAccountORM).filter(
                TrainerStripeAccountORM.trainer_id == trainer_id
            ).first()
            if not account:
                return {"connected": False}

            if is_stripe_configured() and not account.stripe_account_id.startswith("test_"):
                try:
                    remote = stripe.Account.retrieve(account.stripe_account_id)
                    account.onboarding_completed = bool(remote.details_submitted)
                    account.charges_enabled = bool(remote.charges_enabled)
                    account.payouts_enabled = bool(remote.payouts_enabled)
                    db.commit()
                except stripe.StripeError as e:
                    # Fall back to the stored flags
                    logger.error(f"Error checking Stripe account: {e}")

            return {
                "connected": True,
                "accountId": account.stripe_account_id,
                "onboardingCompleted": bool(account.onboarding_completed),
                "chargesEnabled": bool(account.charges_enabled),
                "payoutsEnabled": bool(account.payouts_enabled),
            }
        finally:
            db.close()

    # --- PAYMENTS ---

    def create_payment_intent(self, client: UserORM, data: PaymentIntentRequest) -> dict:
        if not data.trainer_id or not data.amount:
            raise HTTPException(status_code=400, detail="Trainer ID and amount are required")

        db = get_db_session()
        try:
            account_id = self._get_connect_account_id(db, data.trainer_id)
            if not account_id:
                raise HTTPException(status_code=400, detail="Trainer has not set up payments")

            if is_stripe_configured():
                intent = stripe.PaymentIntent.create(
                    amount=to_cents(data.amount),
                    currency=data.currency,
                    description=data.description or "Training payment",
                    application_fee_amount=0,
                    transfer_data={"destination": account_id},
                    metadata={"trainer_id": data.trainer_id, "client_id": client.id}
                )
                intent_id = intent.id
                client_secret = intent.client_secret
            else:
                intent_id = _test_id("pi")
                client_secret = f"{intent_id}_secret_test"

            payment = PaymentORM(
                id=str(uuid.uuid4()),
                trainer_id=data.trainer_id,
                client_id=client.id,
                amount=data.amount,
                currency=data.currency,
                payment_type="one-time",
                stripe_payment_intent_id=intent_id,
                stripe_connect_account_id=account_id,
                status="pending",
                description=data.description,
                created_at=now_iso()
            )
            db.add(payment)
            db.commit()
            logger.info(f"Payment {payment.id} created: {client.id} -> {data.trainer_id} ({data.amount} {data.currency})")

            return {"clientSecret": client_secret, "paymentIntentId": intent_id, "paymentId": payment.id}

        except HTTPException:
            raise
        except stripe.StripeError as e:
            db.rollback()
            logger.error(f"Stripe error creating payment intent: {e}")
            raise HTTPException(status_code=400, detail=f"Stripe error: {str(e)}")
        finally:
            db.close()

    def confirm_payment(self, user_id: str, payment_id: str) -> dict:
        db = get_db_session()
        try:
            payment = db.query(PaymentORM).filter(PaymentORM.id == payment_id).first()
            if not payment:
                raise HTTPException(status_code=404, detail="Payment not found")
            if user_id not in (payment.client_id, payment.trainer_id):
                raise HTTPException(status_code=403, detail="Not authorized")

            payment.status = "completed"
            payment.completed_at = now_iso()
            db.commit()
            return {"message": "Payment confirmed", "payment": to_dict(payment)}
        finally:
            db.close()

    # --- SUBSCRIPTIONS ---

    def create_subscription(self, client: UserORM, data: SubscriptionRequest) -> dict:
        if not data.trainer_id or not data.amount:
            raise HTTPException(status_code=400, detail="Trainer ID and amount are required")

        interval = BILLING_INTERVALS.get(data.billing_cycle, "month")

        db = get_db_session()
        try:
            account_id = self._get_connect_account_id(db, data.trainer_id)
            if not account_id:
                raise HTTPException(status_code=400, detail="Trainer has not set up payments")

            if is_stripe_configured():
                customer_id = client.stripe_customer_id
                if not customer_id:
                    customer = stripe.Customer.create(
                        email=client.email,
                        name=client.name,
                        metadata={"user_id": client.id}
                    )
                    customer_id = customer.id
                    user = db.query(UserORM).filter(UserORM.id == client.id).first()
                    if user:
                        user.stripe_customer_id = customer_id

                stripe_sub = stripe.Subscription.create(
                    customer=customer_id,
                    items=[{
                        "price_data": {
                            "currency": data.currency,
                            "unit_amount": to_cents(data.amount),
                            "recurring": {"interval": interval},
                            "product_data": {"name": data.description or "Training Subscription"},
                        }
                    }],
                    application_fee_percent=0,
                    transfer_data={"destination": account_id},
                    payment_behavior="default_incomplete",
                    expand=["latest_invoice.payment_intent"]
                )
                subscription_id = stripe_sub.id
                status = stripe_sub.status
                period_start = datetime.fromtimestamp(stripe_sub.current_period_start).isoformat()
                period_end = datetime.fromtimestamp(stripe_sub.current_period_end).isoformat()
                client_secret = (
                    stripe_sub.latest_invoice.payment_intent.client_secret
                    if stripe_sub.latest_invoice and stripe_sub.latest_invoice.payment_intent else None
                )
            else:
                customer_id = client.stripe_customer_id or _test_id("cus")
                subscription_id = _test_id("sub")
                status = "active"
                start = datetime.utcnow()
                period_start = start.isoformat()
                period_end = (start + timedelta(days=TEST_PERIOD_DAYS[interval])).isoformat()
                client_secret = f"{subscription_id}_secret_test"

            subscription = SubscriptionORM(
                id=str(uuid.uuid4()),
                trainer_id=data.trainer_id,
                client_id=client.id,
                amount=data.amount,
                currency=data.currency,
                billing_cycle=data.billing_cycle,
                stripe_subscription_id=subscription_id,
                stripe_customer_id=customer_id,
                stripe_connect_account_id=account_id,
                status="active",
                current_period_start=period_start,
                current_period_end=period_end,
                created_at=now_iso()
            )
            db.add(subscription)
            db.commit()
            logger.info(f"Subscription {subscription.id} created: {client.id} -> {data.trainer_id} ({interval})")

            return {
                "subscriptionId": subscription_id,
                "id": subscription.id,
                "clientSecret": client_secret,
                "status": status,
            }

        except HTTPException:
            raise
        except stripe.StripeError as e:
            db.rollback()
            logger.error(f"Stripe error creating subscription: {e}")
            raise HTTPException(status_code=400, detail=f"Stripe error: {str(e)}")
        finally:
            db.close()

    def cancel_subscription(self, user_id: str, subscription_id: str) -> dict:
        db = get_db_session()
        try:
            subscription = db.query(SubscriptionORM).filter(SubscriptionORM.id == subscription_id).first()
            if not subscription:
                raise HTTPException(status_code=404, detail="Subscription not found")
            if subscription.client_id != user_id:
                raise HTTPException(status_code=403, detail="Not authorized")

            remote_id = subscription.stripe_subscription_id
            if is_stripe_configured() and remote_id and not remote_id.startswith("test_"):
                stripe.Subscription.cancel(remote_id)

            subscription.status = "cancelled"
            subscription.cancelled_at = now_iso()
            db.commit()
            logger.info(f"Subscription {subscription_id} cancelled by {user_id}")
            return {"message": "Subscription cancelled successfully"}

        except HTTPException:
            raise
        except stripe.StripeError as e:
            db.rollback()
            logger.error(f"Stripe error cancelling subscription: {e}")
            raise HTTPException(status_code=400, detail=f"Stripe error: {str(e)}")
        finally:
            db.close()

    # --- HISTORY ---

    def get_trainer_history(self, trainer_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(PaymentORM, UserORM).join(
                UserORM, PaymentORM.client_id == UserORM.id
            ).filter(
                PaymentORM.trainer_id == trainer_id
            ).order_by(PaymentORM.created_at.desc()).limit(50).all()
            return [{
                "id": p.id, "amount": p.amount, "currency": p.currency,
                "payment_type": p.payment_type, "status": p.status,
                "created_at": p.created_at, "completed_at": p.completed_at,
                "client_name": u.name, "client_email": u.email,
            } for p, u in rows]
        finally:
            db.close()

    def get_client_history(self, client_id: str) -> List[dict]:
        db = get_db_session()
        try:
            rows = db.query(PaymentORM, UserORM).join(
                UserORM, PaymentORM.trainer_id == UserORM.id
            ).filter(
                PaymentORM.client_id == client_id
            ).order_by(PaymentORM.created_at.desc()).limit(50).all()
            return [{
                "id": p.id, "amount": p.amount, "currency": p.currency,
                "payment_type": p.payment_type, "status": p.status,
                "created_at": p.created_at, "completed_at": p.completed_at,
                "trainer_name": u.name,
            } for p, u in rows]
        finally:
            db.close()

    def get_subscriptions(self, user_id: str, as_trainer: bool = False) -> List[dict]:
        """Subscriptions with the counterparty's name."""
        db = get_db_session()
        try:
            owner_col = SubscriptionORM.trainer_id if as_trainer else SubscriptionORM.client_id
            other_col = SubscriptionORM.client_id if as_trainer else SubscriptionORM.trainer_id
            rows = db.query(SubscriptionORM, UserORM).join(
                UserORM, other_col == UserORM.id
            ).filter(owner_col == user_id).order_by(SubscriptionORM.created_at.desc()).all()

            name_key = "client_name" if as_trainer else "trainer_name"
            return [{
                "id": s.id, "amount": s.amount, "currency": s.currency,
                "billing_cycle": s.billing_cycle, "status": s.status,
                "current_period_start": s.current_period_start,
                "current_period_end": s.current_period_end,
                "cancelled_at": s.cancelled_at,
                name_key: u.name,
            } for s, u in rows]
        finally:
            db.close()


# Singleton instance
payment_service = PaymentService()

def get_payment_service() -> PaymentService:
    """Dependency injection helper."""
    return payment_service
