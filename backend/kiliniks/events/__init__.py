from .publishers import ConsolePublisher, EventBridgePublisher, build_event_publisher

__all__ = ["ConsolePublisher", "EventBridgePublisher", "build_event_publisher"]
