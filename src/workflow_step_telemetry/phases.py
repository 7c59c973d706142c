"""Init and finish phases of the workflow telemetry action."""

import os
from collections.abc import Callable

from . import runner
from .buildevents import FieldStore, SpanEmitter, install
from .errors import ConfigurationError
from .github import CommentPublisher, GitHubClient, JobResolver
from .models import ActionInputs, ExecutionContext, WorkflowJob
from .tracing import (
    StepTracer,
    build_trace_id,
    get_timestamp,
    random_span_id,
    replace_spaces,
)
from .utils.logging import log_debug, log_error, log_info, log_success

META_SOURCE = "workflow-step-telemetry"

STATE_BUILD_START = "buildStart"
STATE_IS_POST = "isPost"
STATE_END_TRACE = "endTrace"


class WorkflowTelemetry:
    """Run the init phase at job start and the finish phase at job end.

    The two phases run in separate processes and share state only through
    the runner state store and the buildevents sidecar file.

    Parameters
    ----------
    context : ExecutionContext
        Current job context.
    inputs : ActionInputs
        Action inputs.
    emitter : SpanEmitter or None, optional
        Span emitter, defaults to the ``buildevents`` on ``PATH``.
    field_store : FieldStore or None, optional
        Sidecar field store, defaults to ``BUILDEVENT_FILE``.
    client : GitHubClient or None, optional
        GitHub client, defaults to one using ``inputs.github_token``.
    resolver : JobResolver or None, optional
        Job resolver, defaults to one using ``client``.
    installer : Callable[..., str], optional
        Installs buildevents, replaceable in tests.

    Attributes
    ----------
    failed : bool
        Whether a phase has reported a hard failure.

    """

    def __init__(
        self,
        context: ExecutionContext,
        inputs: ActionInputs,
        emitter: SpanEmitter | None = None,
        field_store: FieldStore | None = None,
        client: GitHubClient | None = None,
        resolver: JobResolver | None = None,
        installer: Callable[..., str] = install,
    ):
        self.context = context
        self.inputs = inputs
        self.emitter = emitter or SpanEmitter()
        self.field_store = field_store or FieldStore()
        self.client = client or GitHubClient(context, inputs.github_token)
        self.resolver = resolver or JobResolver(self.client, context)
        self.publisher = CommentPublisher(self.client, context, inputs)
        self.installer = installer
        self.trace_id = build_trace_id(context, inputs.otel_trace_id)
        self.step_tracer = StepTracer(self.trace_id, self.emitter, self.field_store)
        self.failed = False

    def _fail(self, message: str) -> None:
        log_error(message)
        runner.set_failed(message)
        self.failed = True

    def context_fields(self) -> dict[str, str]:
        """Fields describing the run, attached to every span."""
        ctx = self.context
        return {
            "github.workflow": ctx.workflow,
            "github.run_id": ctx.run_id,
            "github.run_number": ctx.run_number,
            "github.actor": ctx.actor,
            "github.repository": ctx.repository,
            "github.repository_owner": ctx.repository_owner,
            "github.event_name": ctx.event_name,
            "github.sha": ctx.sha,
            "github.ref": ctx.ref,
            "github.head_ref": ctx.head_ref,
            "github.base_ref": ctx.base_ref,
            "github.job": ctx.job,
            "github.matrix-key": self.inputs.matrix_key,
            "runner.os": ctx.runner_os,
            "meta.source": META_SOURCE,
        }

    def init(self) -> bool:
        """Install buildevents, seed the trace and save state for ``finish``.

        Returns
        -------
        bool
            True on success. Failures are logged and reported to the runner.

        """
        log_info("Initializing ...")

        try:
            build_start = get_timestamp()

            if not self.inputs.apikey:
                raise ConfigurationError("Input required and not supplied: apikey")
            runner.set_secret(self.inputs.apikey)
            if not self.inputs.dataset:
                raise ConfigurationError("Input required and not supplied: dataset")

            log_info(f"Trace ID: {self.trace_id}")
            runner.export_variable("TRACE_ID", self.trace_id)

            self.installer(
                self.inputs.apikey,
                self.inputs.apihost,
                self.inputs.dataset,
                self.inputs.github_token,
            )

            self.field_store.add_fields(self.context_fields())

            # First span times the installation of buildevents
            init_step_name = "-".join(
                part
                for part in [
                    "workflow-step-telemetry_init",
                    self.context.job,
                    self.inputs.matrix_key,
                ]
                if part
            )
            self.emitter.step(
                self.trace_id,
                random_span_id(),
                str(build_start),
                replace_spaces(init_step_name),
            )
            log_info("Init done! buildevents is now available on the path.")

            runner.save_state(STATE_BUILD_START, str(build_start))
            runner.save_state(STATE_IS_POST, "true")
            runner.save_state(STATE_END_TRACE, "true")

            self.step_tracer.start()
        except Exception as e:
            self._fail(str(e))
            return False

        log_success("Initialization completed")
        return True

    def run_post(self, job: WorkflowJob) -> str | None:
        """Send step spans, the post meta-step and close the root span.

        Parameters
        ----------
        job : WorkflowJob
            Current job.

        Returns
        -------
        str or None
            Trace URL, None if the root span could not be closed.

        """
        try:
            post_start = get_timestamp()
            trace_start = runner.get_state(STATE_BUILD_START)
            workflow_status = self.context.workflow_status
            result = "success" if workflow_status.upper() == "SUCCESS" else "failure"

            self.field_store.add_fields(
                {"job.status": workflow_status, "workflow.status": workflow_status}
            )

            if not self.step_tracer.finish(job):
                self._fail("Not all workflow steps could be sent to Honeycomb")

            self.emitter.step(
                self.trace_id,
                random_span_id(),
                str(post_start),
                "workflow-step-telemetry_post",
            )

            return self.emitter.build(self.trace_id, trace_start, result)
        except Exception as e:
            self._fail(str(e))
            return None

    def finish(self) -> bool:
        """Trace the finished steps, close the trace and publish the summary.

        Returns
        -------
        bool
            False if any part reported a hard failure. A job that cannot be
            found only skips reporting.

        """
        log_info("Finishing ...")

        try:
            job = self.resolver.resolve_current_job()
            if job is None:
                log_error(
                    "Couldn't find current job. So action will not report any data."
                )
                return not self.failed

            log_debug(f"Current job: {job}")

            is_post = bool(runner.get_state(STATE_IS_POST))
            end_trace = bool(runner.get_state(STATE_END_TRACE))

            trace_url = None
            if is_post and end_trace:
                trace_url = self.run_post(job)

            if trace_url:
                log_info(f"Trace URL: {trace_url}")
            if (self.inputs.comment_on_pr or self.inputs.job_summary) and trace_url:
                if not self.publisher.publish(job, trace_url):
                    self._fail("Failed to publish the trace summary")
        except Exception as e:
            self._fail(str(e))
            return False

        log_info("Finish completed")
        return not self.failed

    def run_command(self, name: str, command: str) -> bool:
        """Run a command wrapped in a buildevents command span.

        Parameters
        ----------
        name : str
            Span name.
        command : str
            Shell-style command line.

        Returns
        -------
        bool
            True if buildevents and the command succeeded.

        """
        trace_id = os.environ.get("TRACE_ID") or self.trace_id
        try:
            self.emitter.cmd(trace_id, random_span_id(), replace_spaces(name), command)
        except Exception as e:
            self._fail(str(e))
            return False
        return True
