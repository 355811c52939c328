"""Logging and tracing helpers."""

from annoflow.shared.telemetry.logging import get_logger, setup_logging
from annoflow.shared.telemetry.tracing import add_span_attributes, traced

__all__ = ["add_span_attributes", "get_logger", "setup_logging", "traced"]
