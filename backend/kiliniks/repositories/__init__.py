# Repositories package initialization
# SQLAlchemy-backed implementations of the domain repository interfaces

from .appointment_repo import AppointmentRepository
from .flow_repo import FlowRepository
from .location_repo import LocationRepository
from .stage_repo import StageRepository

__all__ = [
    "AppointmentRepository",
    "FlowRepository",
    "LocationRepository",
    "StageRepository",
]
