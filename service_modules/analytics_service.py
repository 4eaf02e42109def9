"""
Analytics Service - trainer dashboard figures.

Dates are stored as ISO strings, so rows are filtered and aggregated in
Python rather than with SQL date arithmetic.
"""
from typing import List, Optional

from .base import (
    logging, datetime, timedelta,
    get_db_session, UserORM, ClientORM, TrainerRequestORM,
    WorkoutORM, WorkoutAssignmentORM, DailyCheckInORM, TrainerAlertORM,
    to_dict
)
from models_orm import PaymentORM, SubscriptionORM
from .alert_service import alert_payload

logger = logging.getLogger("trainr")

ACTIVITY_WINDOW_DAYS = 30


def _cutoff(days: Optional[str]) -> Optional[str]:
    """ISO lower bound for a 'days' query value; None means all time."""
    if days is None or str(days) == "all":
        return None
    try:
        count = int(days)
    except ValueError:
        count = 30
    return (datetime.utcnow() - timedelta(days=count)).isoformat()


def _in_window(value: Optional[str], cutoff: Optional[str]) -> bool:
    if cutoff is None:
        return True
    if not value:
        return False
    # Plain dates compare against the date part of the cutoff
    return value >= cutoff[:len(value)]


def _avg(values: List[float]) -> float:
    values = [v for v in values if v is not None]
    return sum(values) / len(values) if values else 0


def _pct(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole else 0


def _days_between(start: Optional[str], end: Optional[str]) -> Optional[int]:
    try:
        return (datetime.fromisoformat(end) - datetime.fromisoformat(start)).days
    except (TypeError, ValueError):
        return None


class AnalyticsService:
    """Service computing the trainer analytics dashboard."""

    def get_analytics(self, trainer_id: str, days: Optional[str] = "30") -> dict:
        cutoff = _cutoff(days)
        db = get_db_session()
        try:
            client_ids = [
                c.user_id for c in db.query(ClientORM).filter(ClientORM.trainer_id == trainer_id).all()
            ]
            return {
                "financial": self._financial(db, trainer_id, cutoff),
                "clients": self._clients(db, trainer_id, client_ids, cutoff),
                "workouts": self._workouts(db, trainer_id, client_ids, cutoff),
                "checkIns": self._check_ins(db, trainer_id, client_ids, cutoff),
            }
        finally:
            db.close()

    def _financial(self, db, trainer_id: str, cutoff: Optional[str]) -> dict:
        payments = [
            p for p in db.query(PaymentORM).filter(PaymentORM.trainer_id == trainer_id).all()
            if _in_window(p.created_at, cutoff)
        ]
        subscriptions = db.query(SubscriptionORM).filter(SubscriptionORM.trainer_id == trainer_id).all()

        completed = [p for p in payments if p.status == "completed"]
        total_revenue = sum(p.amount or 0 for p in completed)
        active_subs = [s for s in subscriptions if s.status == "active"]
        cancelled_subs = [
            s for s in subscriptions if s.status == "cancelled" and _in_window(s.created_at, cutoff)
        ]

        revenue_by_client = {}
        for p in completed:
            revenue_by_client[p.client_id] = revenue_by_client.get(p.client_id, 0) + (p.amount or 0)
        top = sorted(revenue_by_client.items(), key=lambda item: item[1], reverse=True)[:5]
        names = {
            u.id: u.name for u in db.query(UserORM).filter(UserORM.id.in_([cid for cid, _ in top])).all()
        } if top else {}

        durations = [
            _days_between(s.created_at, s.cancelled_at) for s in subscriptions if s.cancelled_at
        ]

        return {
            "totalRevenue": total_revenue,
            "monthlyRecurringRevenue": sum(s.amount or 0 for s in active_subs),
            "activeSubscriptions": len(active_subs),
            "cancelledSubscriptions": len(cancelled_subs),
            "subscriptionRevenue": sum(p.amount or 0 for p in completed if p.subscription_id),
            "oneTimeRevenue": sum(p.amount or 0 for p in completed if p.payment_type == "one-time"),
            "totalPayments": len(payments),
            "paymentSuccessRate": _pct(len(completed), len(payments)),
            "avgRevenuePerClient": total_revenue / len(revenue_by_client) if revenue_by_client else 0,
            "totalClients": len(revenue_by_client),
            "churnRate": _pct(len(cancelled_subs), len(subscriptions)),
            "avgSubscriptionDuration": int(_avg(durations)),
            "topClients": [
                {"id": cid, "name": names.get(cid), "totalRevenue": amount} for cid, amount in top
            ],
        }

    def _clients(self, db, trainer_id: str, client_ids: List[str], cutoff: Optional[str]) -> dict:
        clients = db.query(ClientORM).filter(ClientORM.trainer_id == trainer_id).all()
        recent = (datetime.utcnow() - timedelta(days=ACTIVITY_WINDOW_DAYS)).date().isoformat()

        assignments = db.query(WorkoutAssignmentORM).filter(
            WorkoutAssignmentORM.client_id.in_(client_ids)
        ).all() if client_ids else []
        check_ins = db.query(DailyCheckInORM).filter(
            DailyCheckInORM.client_id.in_(client_ids)
        ).all() if client_ids else []

        active = set()
        for a in assignments:
            if (a.completed_date or "")[:10] >= recent or (a.assigned_date or "")[:10] >= recent:
                active.add(a.client_id)
        for c in check_ins:
            if (c.check_in_date or "") >= recent:
                active.add(c.client_id)

        window_assignments = [a for a in assignments if _in_window(a.created_at, cutoff)]
        window_check_ins = [c for c in check_ins if _in_window(c.check_in_date, cutoff)]
        workout_clients = {a.client_id for a in window_assignments}
        check_in_clients = {c.client_id for c in window_check_ins}

        return {
            "totalClients": len(clients),
            "activeClients": len(active),
            "newClients": len([c for c in clients if _in_window(c.created_at, cutoff)]),
            "retentionRate": _pct(len(active), len(clients)),
            "avgWorkoutsPerClient": len(window_assignments) / len(workout_clients) if workout_clients else 0,
            "avgCheckInsPerClient": len(window_check_ins) / len(check_in_clients) if check_in_clients else 0,
            "clientsWithGoals": len([c for c in clients if c.primary_goal]),
        }

    def _workouts(self, db, trainer_id: str, client_ids: List[str], cutoff: Optional[str]) -> dict:
        rows = db.query(WorkoutAssignmentORM).join(
            WorkoutORM, WorkoutAssignmentORM.workout_id == WorkoutORM.id
        ).filter(WorkoutORM.trainer_id == trainer_id).all()
        assigned = [a for a in rows if _in_window(a.created_at, cutoff)]
        completed = [a for a in rows if a.status == "completed" and _in_window(a.completed_date, cutoff)]

        check_ins = [
            c for c in (db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id.in_(client_ids)
            ).all() if client_ids else [])
            if _in_window(c.check_in_date, cutoff)
        ]

        return {
            "totalAssigned": len(assigned),
            "totalCompleted": len(completed),
            "completionRate": _pct(len(completed), len(assigned)),
            "avgRating": _avg([c.workout_rating for c in check_ins]),
            "avgDuration": int(_avg([c.workout_duration for c in check_ins])),
        }

    def _check_ins(self, db, trainer_id: str, client_ids: List[str], cutoff: Optional[str]) -> dict:
        check_ins = [
            c for c in (db.query(DailyCheckInORM).filter(
                DailyCheckInORM.client_id.in_(client_ids)
            ).all() if client_ids else [])
            if _in_window(c.check_in_date, cutoff)
        ]
        workouts_completed = db.query(WorkoutAssignmentORM).join(
            WorkoutORM, WorkoutAssignmentORM.workout_id == WorkoutORM.id
        ).filter(
            WorkoutORM.trainer_id == trainer_id,
            WorkoutAssignmentORM.status == "completed"
        ).all()
        workouts_completed = [a for a in workouts_completed if _in_window(a.completed_date, cutoff)]
        clients_with_check_ins = {c.client_id for c in check_ins}

        return {
            "totalCheckIns": len(check_ins),
            # Check-ins are expected after every completed workout
            "completionRate": _pct(len(check_ins), len(workouts_completed)),
            "avgSleepQuality": _avg([c.sleep_quality for c in check_ins]),
            "avgEnergyLevel": _avg([c.energy_level for c in check_ins]),
            "avgSleepHours": _avg([c.sleep_hours for c in check_ins]),
            "avgWorkoutRating": _avg([c.workout_rating for c in check_ins]),
            "painReports": len([c for c in check_ins if c.pain_experienced]),
            "responseRate": _pct(len([c for c in check_ins if c.trainer_response]), len(check_ins)),
            "avgCheckInsPerClient": len(check_ins) / len(clients_with_check_ins) if clients_with_check_ins else 0,
        }

    def get_alerts_widget(self, trainer_id: str) -> dict:
        """Unread alerts, pending requests and last-24h check-ins as one feed."""
        db = get_db_session()
        try:
            alerts = [
                dict(alert_payload(alert, client), type="alert")
                for alert, client in db.query(TrainerAlertORM, UserORM).outerjoin(
                    UserORM, TrainerAlertORM.client_id == UserORM.id
                ).filter(
                    TrainerAlertORM.trainer_id == trainer_id,
                    TrainerAlertORM.is_read == False
                ).order_by(TrainerAlertORM.created_at.desc()).limit(10).all()
            ]

            requests = [
                to_dict(req, client_name=user.name, client_email=user.email, type="request")
                for req, user in db.query(TrainerRequestORM, UserORM).join(
                    UserORM, TrainerRequestORM.client_id == UserORM.id
                ).filter(
                    TrainerRequestORM.trainer_id == trainer_id,
                    TrainerRequestORM.status == "pending"
                ).order_by(TrainerRequestORM.created_at.desc()).limit(10).all()
            ]

            since = (datetime.utcnow() - timedelta(hours=24)).isoformat()
            check_ins = [
                to_dict(c, client_name=user.name, client_email=user.email, type="checkin")
                for c, user in db.query(DailyCheckInORM, UserORM).join(
                    UserORM, DailyCheckInORM.client_id == UserORM.id
                ).join(
                    ClientORM, ClientORM.user_id == DailyCheckInORM.client_id
                ).filter(
                    ClientORM.trainer_id == trainer_id,
                    DailyCheckInORM.status == "completed",
                    DailyCheckInORM.created_at >= since
                ).order_by(DailyCheckInORM.created_at.desc()).limit(10).all()
            ]

            items = sorted(
                alerts + requests + check_ins,
                key=lambda item: item.get("created_at") or item.get("check_in_date") or "",
                reverse=True
            )[:15]

            return {
                "items": items,
                "counts": {
                    "alerts": len(alerts),
                    "requests": len(requests),
                    "checkIns": len(check_ins),
                    "total": len(items),
                },
            }
        finally:
            db.close()


# Singleton instance
analytics_service = AnalyticsService()

def get_analytics_service() -> AnalyticsService:
    """Dependency injection helper."""
    return analytics_service
