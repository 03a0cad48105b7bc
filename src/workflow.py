"""
Feedback Workflow Engine.

Runs one feedback text through the compiled graph and produces either a
WorkflowOutcome (Done) or a captured failure kind (Failed).
"""

from concurrent.futures import ThreadPoolExecutor, wait

from src.errors import FAILURE_KINDS, FeedbackError
from src.graph import create_graph
from src.models import FeedbackState, WorkflowConfig, WorkflowOutcome


class FeedbackWorkflow:

    def __init__(self, classifier, dispatcher, config: WorkflowConfig):
        self.config = config
        self.classifier = classifier
        self.dispatcher = dispatcher
        self._closed = False
        self._pending_dispatches = set()
        self.graph = create_graph(classifier, dispatcher, config, submit=self.submit_dispatch)

    def submit_dispatch(self, fn, *args):
        """
        Run one notification dispatch on its own thread and return its future.

        Every dispatch gets a dedicated worker, so a slow publish never delays
        another invocation's notification.

        Raises:
            RuntimeError: after close(); the notify node then dispatches inline
        """
        if self._closed:
            raise RuntimeError("Workflow is closed")

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify")
        future = executor.submit(fn, *args)
        executor.shutdown(wait=False)

        self._pending_dispatches.add(future)
        future.add_done_callback(self._pending_dispatches.discard)
        return future

    def run(self, text: str, language_code: str = None) -> FeedbackState:
        """Run the graph to a terminal state and return the final state."""
        initial_state = {
            "feedback_text": text,
            "language_code": language_code or self.config.language_code,
            "classification": None,
            "notified": False,
            "failure_kind": None,
            "failure_message": None,
            "status": "pending",
        }
        return self.graph.invoke(initial_state)

    @staticmethod
    def outcome(state: FeedbackState) -> WorkflowOutcome:
        """
        Convert a terminal state into its result.

        Raises:
            FeedbackError: the captured failure, for states that ended in Failed
        """
        if state["status"] == "done":
            return WorkflowOutcome(sentiment=state["classification"].sentiment, notified=state["notified"])

        error_cls = FAILURE_KINDS.get(state.get("failure_kind"), FeedbackError)
        raise error_cls(state.get("failure_message") or "Workflow failed")

    def close(self, timeout: float = None) -> None:
        """Stop detaching dispatches and wait for pending ones (up to timeout seconds)."""
        self._closed = True
        pending = list(self._pending_dispatches)
        if pending:
            wait(pending, timeout=timeout)
