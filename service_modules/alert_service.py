"""
Alert Service - trainer alerts raised from client check-ins.
"""
from typing import List, Optional

from .base import (
    HTTPException, logging,
    get_db_session, UserORM, TrainerAlertORM,
    to_dict, now_iso
)

logger = logging.getLogger("trainr")


def alert_payload(alert: TrainerAlertORM, client: Optional[UserORM]) -> dict:
    return to_dict(
        alert,
        client_name=client.name if client else None,
        client_email=client.email if client else None,
    )


class AlertService:
    """Service for listing and acknowledging trainer alerts."""

    def get_alerts(self, trainer_id: str, unread_only: bool = False, limit: Optional[int] = 50) -> List[dict]:
        db = get_db_session()
        try:
            query = db.query(TrainerAlertORM, UserORM).outerjoin(
                UserORM, TrainerAlertORM.client_id == UserORM.id
            ).filter(TrainerAlertORM.trainer_id == trainer_id)
            if unread_only:
                query = query.filter(TrainerAlertORM.is_read == False)
            query = query.order_by(TrainerAlertORM.created_at.desc())
            if limit:
                query = query.limit(limit)
            return [alert_payload(alert, client) for alert, client in query.all()]
        finally:
            db.close()

    def get_unread_count(self, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            count = db.query(TrainerAlertORM).filter(
                TrainerAlertORM.trainer_id == trainer_id,
                TrainerAlertORM.is_read == False
            ).count()
            return {"count": count}
        finally:
            db.close()

    def _get_owned(self, db, trainer_id: str, alert_id: str) -> TrainerAlertORM:
        alert = db.query(TrainerAlertORM).filter(
            TrainerAlertORM.id == alert_id,
            TrainerAlertORM.trainer_id == trainer_id
        ).first()
        if not alert:
            raise HTTPException(status_code=404, detail="Alert not found")
        return alert

    def mark_read(self, trainer_id: str, alert_id: str) -> dict:
        db = get_db_session()
        try:
            alert = self._get_owned(db, trainer_id, alert_id)
            alert.is_read = True
            alert.read_at = now_iso()
            db.commit()
            return {"message": "Alert marked as read"}
        finally:
            db.close()

    def mark_all_read(self, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            updated = db.query(TrainerAlertORM).filter(
                TrainerAlertORM.trainer_id == trainer_id,
                TrainerAlertORM.is_read == False
            ).update({"is_read": True, "read_at": now_iso()}, synchronize_session=False)
            db.commit()
            logger.info(f"Trainer {trainer_id} marked {updated} alert(s) read")
            return {"message": "All alerts marked as read"}
        finally:
            db.close()

    def delete_alert(self, trainer_id: str, alert_id: str) -> dict:
        db = get_db_session()
        try:
            alert = self._get_owned(db, trainer_id, alert_id)
            db.delete(alert)
            db.commit()
            return {"message": "Alert deleted"}
        finally:
            db.close()


# Singleton instance
alert_service = AlertService()

def get_alert_service() -> AlertService:
    """Dependency injection helper."""
    return alert_service
