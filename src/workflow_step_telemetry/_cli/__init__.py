"""Command-line interface for workflow-step-telemetry."""
