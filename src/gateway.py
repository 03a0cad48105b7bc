"""
Synchronous Invocation Gateway.

Accepts one feedback text, runs the workflow engine to completion inside a
bounded deadline, retries transient classification failures, and maps the
result onto the caller's response contract.
"""

import asyncio
import json
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout, wait

from src.classifier import create_classifier, validate_feedback_text
from src.dispatcher import create_dispatcher
from src.errors import ClassifierUnavailable, DeadlineExceeded, FeedbackError
from src.logger import log, log_event
from src.models import WorkflowConfig, WorkflowOutcome
from src.workflow import FeedbackWorkflow


class InvocationGateway:

    def __init__(self, workflow: FeedbackWorkflow, config: WorkflowConfig, sleep=time.sleep):
        self.workflow = workflow
        self.config = config
        self._sleep = sleep
        self._abandoned_runs = set()

    def _start_run(self, text: str, language_code: str):
        """Start one workflow run on its own worker thread; nothing is shared with other invocations."""
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="invoke")
        future = executor.submit(self.workflow.run, text, language_code)
        executor.shutdown(wait=False)
        return future

    def _abandon(self, future) -> None:
        self._abandoned_runs.add(future)
        future.add_done_callback(self._abandoned_runs.discard)

    def _backoff(self, attempt: int) -> float:
        delay = self.config.retry_backoff_seconds * (2 ** (attempt - 1))
        return min(delay, self.config.retry_backoff_max_seconds)

    def invoke(self, text: str, deadline: float = None, language_code: str = None) -> WorkflowOutcome:
        """
        Run one workflow invocation.

        Args:
            text: Feedback text
            deadline: Time budget in seconds (default: config.deadline_seconds)
            language_code: Language hint for the classifier

        Returns:
            WorkflowOutcome on success

        Raises:
            FeedbackError: EmptyFeedback / InputTooLarge (no outbound calls made),
                ClassifierUnavailable (after retries), ClassifierRejected, DeadlineExceeded
        """
        budget = self.config.deadline_seconds if deadline is None else deadline
        expires_at = time.monotonic() + budget

        validate_feedback_text(text, self.config.max_input_bytes)

        attempt = 0
        while True:
            attempt += 1
            remaining = expires_at - time.monotonic()
            if remaining <= 0:
                raise DeadlineExceeded(f"Deadline of {budget}s exceeded before attempt {attempt}")

            # Timed-out runs are abandoned, not cancelled: issued calls complete on their own
            future = self._start_run(text, language_code)
            try:
                state = future.result(timeout=remaining)
            except FutureTimeout:
                self._abandon(future)
                log_event("deadline_exceeded", budget=budget, attempt=attempt)
                raise DeadlineExceeded(f"Workflow did not finish within {budget}s") from None

            try:
                outcome = self.workflow.outcome(state)
            except ClassifierUnavailable as e:
                if attempt >= self.config.max_classify_attempts:
                    log(f"\n    Maximum classification attempts ({self.config.max_classify_attempts}) reached.")
                    raise

                delay = self._backoff(attempt)
                remaining = expires_at - time.monotonic()
                if delay >= remaining:
                    log_event("deadline_exceeded", budget=budget, attempt=attempt)
                    raise DeadlineExceeded(f"No time left to retry classification within {budget}s") from e

                log(f" Retrying classification (attempt {attempt + 1}/{self.config.max_classify_attempts}) in {delay:.2f}s")
                self._sleep(delay)
                continue

            log_event("invocation_done", sentiment=outcome.sentiment, notified=outcome.notified, attempts=attempt)
            return outcome

    async def ainvoke(self, text: str, deadline: float = None, language_code: str = None) -> WorkflowOutcome:
        """
        Async wrapper around `invoke`.

        Cancelling the awaiting task abandons the wait; calls already issued are not cancelled.
        """
        return await asyncio.to_thread(self.invoke, text, deadline, language_code)

    def handle(self, event: dict, deadline: float = None) -> dict:
        """
        Map an inbound request `{"input": "<text>"}` onto the response contract.

        Success: {"status": "SUCCEEDED", "output": "{\\"Sentiment\\": \\"POSITIVE\\"}"}
        Failure: {"status": "FAILED", "error": {"message": ..., "type": ...}}
        """
        text = event.get("input") if isinstance(event, dict) else None
        language_code = event.get("language_code") if isinstance(event, dict) else None

        try:
            outcome = self.invoke(text, deadline=deadline, language_code=language_code)
        except FeedbackError as e:
            log_event("invocation_failed", kind=e.kind, error=e.message[:200])
            return {"status": "FAILED", "error": e.to_error_payload()}

        return {"status": "SUCCEEDED", "output": json.dumps(outcome.to_payload())}

    def close(self, wait_for_abandoned: bool = False) -> None:
        """
        Wait for abandoned runs, then for pending notification dispatches.

        Abandoned runs are waited for up to the per-call timeouts (classifier plus
        dispatch), or without a bound when wait_for_abandoned is set. A run still
        going after that keeps its thread; if it reaches notify it dispatches inline.
        """
        timeout = None
        if not wait_for_abandoned:
            timeout = self.config.classifier_timeout_seconds + self.config.dispatch_timeout_seconds

        abandoned = list(self._abandoned_runs)
        if abandoned:
            wait(abandoned, timeout=timeout)
        self.workflow.close(timeout=timeout)


def build_gateway(config: WorkflowConfig = None) -> InvocationGateway:
    """Wire classifier, dispatcher, engine and gateway from settings."""
    config = config or WorkflowConfig.from_settings()
    workflow = FeedbackWorkflow(create_classifier(config), create_dispatcher(config), config)
    return InvocationGateway(workflow, config)
