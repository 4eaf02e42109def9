"""
Services package - organized service modules.

Each module holds one service class, its singleton and a get_* dependency
helper for the routes.
"""
from .base import *
from .auth_service import AuthService, auth_service, get_auth_service
from .profile_service import ProfileService, profile_service, get_profile_service
from .trainer_service import TrainerService, trainer_service, get_trainer_service
from .workout_service import WorkoutService, workout_service, get_workout_service
from .client_service import ClientService, client_service, get_client_service
from .message_service import MessageService, message_service, get_message_service
from .payment_service import PaymentService, payment_service, get_payment_service
from .alert_service import AlertService, alert_service, get_alert_service
from .analytics_service import AnalyticsService, analytics_service, get_analytics_service
from .ai_workout_service import AIWorkoutService, ai_workout_service, get_ai_workout_service
from .program_service import ProgramService, program_service, get_program_service
from .schedule_service import ScheduleService, schedule_service, get_schedule_service
from .nutrition_service import NutritionService, nutrition_service, get_nutrition_service

__all__ = [
    'AuthService', 'auth_service', 'get_auth_service',
    'ProfileService', 'profile_service', 'get_profile_service',
    'TrainerService', 'trainer_service', 'get_trainer_service',
    'WorkoutService', 'workout_service', 'get_workout_service',
    'ClientService', 'client_service', 'get_client_service',
    'MessageService', 'message_service', 'get_message_service',
    'PaymentService', 'payment_service', 'get_payment_service',
    'AlertService', 'alert_service', 'get_alert_service',
    'AnalyticsService', 'analytics_service', 'get_analytics_service',
    'AIWorkoutService', 'ai_workout_service', 'get_ai_workout_service',
    'ProgramService', 'program_service', 'get_program_service',
    'ScheduleService', 'schedule_service', 'get_schedule_service',
    'NutritionService', 'nutrition_service', 'get_nutrition_service',
]
