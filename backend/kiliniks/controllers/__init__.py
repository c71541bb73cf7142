from .appointment_controller import appointments_bp
from .flow_controller import flows_bp
from .health_controller import health_bp
from .location_controller import locations_bp
from .stage_controller import stages_bp

__all__ = [
    "appointments_bp",
    "flows_bp",
    "health_bp",
    "locations_bp",
    "stages_bp",
]
