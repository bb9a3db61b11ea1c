from .decision_store import DecisionStore
from .metrics_port import MetricsPort
from .logging_port import LoggingPort, BoundLogger

__all__ = ["DecisionStore", "MetricsPort", "LoggingPort", "BoundLogger"]
