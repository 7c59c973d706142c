"""Shared utilities for workflow-step-telemetry."""

from .retry import retry_until

__all__ = ["retry_until"]
