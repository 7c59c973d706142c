"""Emit one span per completed workflow step."""

from ..buildevents import FieldStore, SpanEmitter
from ..models import WorkflowJob
from ..utils.logging import log_error, log_info
from .identity import replace_spaces, step_span_id


class StepTracer:
    """Map the steps of a finished job onto buildevents step spans.

    Parameters
    ----------
    trace_id : str
        Trace ID of the workflow run.
    emitter : SpanEmitter
        Emitter used to send step spans.
    field_store : FieldStore
        Sidecar field store that receives per-step fields.

    """

    def __init__(self, trace_id: str, emitter: SpanEmitter, field_store: FieldStore):
        self.trace_id = trace_id
        self.emitter = emitter
        self.field_store = field_store

    def start(self) -> bool:
        """Mark the tracer as started.

        Returns
        -------
        bool
            Always True; nothing is collected until ``finish``.

        """
        log_info("Starting step tracer ...")
        log_info("Started step tracer")
        return True

    def finish(self, job: WorkflowJob) -> bool:
        """Send a span for every step that has both start and end times.

        Steps are emitted in ordinal order. The first failed emission stops
        the remaining steps.

        Parameters
        ----------
        job : WorkflowJob
            Current job with its steps.

        Returns
        -------
        bool
            True if all eligible steps were emitted, False otherwise.

        """
        log_info("Finishing step tracer ...")

        try:
            for step in job.steps:
                if step.started_at is None or step.completed_at is None:
                    continue

                span_id = step_span_id(step.name, step.number)
                start_time = int(step.started_at.timestamp())

                self.field_store.add_fields(
                    {
                        "step.number": str(step.number),
                        "step.conclusion": step.conclusion or "",
                        "step.status": step.status or "",
                    }
                )

                self.emitter.step(
                    self.trace_id, span_id, str(start_time), replace_spaces(step.name)
                )
        except Exception as e:
            log_error("Unable to finish step tracer")
            log_error(str(e))
            return False

        log_info("Finished step tracer")
        return True
