"""
Workout Service - standalone workout detail and client completion.
"""
from .base import (
    HTTPException, uuid, logging,
    get_db_session, WorkoutORM, WorkoutExerciseORM, WorkoutAssignmentORM, WorkoutLogORM,
    now_iso
)
from models import CompleteWorkoutRequest

logger = logging.getLogger("trainr")


class WorkoutService:
    """Service for reading and completing assigned workouts."""

    def get_workout(self, workout_id: str) -> dict:
        db = get_db_session()
        try:
            workout = db.query(WorkoutORM).filter(WorkoutORM.id == workout_id).first()
            if not workout:
                raise HTTPException(status_code=404, detail="Workout not found")

            exercises = db.query(WorkoutExerciseORM).filter(
                WorkoutExerciseORM.workout_id == workout_id
            ).order_by(WorkoutExerciseORM.order_index).all()

            return {
                "id": workout.id,
                "trainer_id": workout.trainer_id,
                "name": workout.name,
                "description": workout.description,
                "created_at": workout.created_at,
                "exercises": [{
                    "name": e.exercise_name,
                    "sets": e.sets,
                    "reps": e.reps,
                    "weight": e.weight,
                    "rest": e.rest,
                    "notes": e.notes,
                } for e in exercises],
            }
        finally:
            db.close()

    def complete_workout(self, client_id: str, workout_id: str, data: CompleteWorkoutRequest) -> dict:
        """Mark the client's assignment completed and write a workout log."""
        db = get_db_session()
        try:
            assignments = db.query(WorkoutAssignmentORM).filter(
                WorkoutAssignmentORM.workout_id == workout_id,
                WorkoutAssignmentORM.client_id == client_id
            ).all()
            if not assignments:
                raise HTTPException(status_code=404, detail="Workout assignment not found")

            completed_at = now_iso()
            for assignment in assignments:
                assignment.status = "completed"
                assignment.completed_date = completed_at

            db.add(WorkoutLogORM(
                id=str(uuid.uuid4()),
                client_id=client_id,
                workout_id=workout_id,
                completed_date=completed_at,
                duration=data.duration,
                notes=data.notes
            ))
            db.commit()
            logger.info(f"Client {client_id} completed workout {workout_id}")
            return {"message": "Workout marked as complete"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error completing workout {workout_id} for {client_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to complete workout: {str(e)}")
        finally:
            db.close()


# Singleton instance
workout_service = WorkoutService()

def get_workout_service() -> WorkoutService:
    """Dependency injection helper."""
    return workout_service
