"""Server telemetry header management"""

from .server_telemetry import ServerTelemetryManager, ServerTelemetryRequest

__all__ = ["ServerTelemetryManager", "ServerTelemetryRequest"]
