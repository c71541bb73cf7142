from .appointment_service import AppointmentService
from .flow_service import FlowService

__all__ = ["AppointmentService", "FlowService"]
