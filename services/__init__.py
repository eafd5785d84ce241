"""Services package - Business logic layer"""

from services import elimination_policy, timezone_service
from services.schedule_service import ScheduleService

__all__ = [
    "ScheduleService",
    "elimination_policy",
    "timezone_service",
]
