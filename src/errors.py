"""
Error taxonomy for the feedback workflow.

Only precondition and classification errors (plus DeadlineExceeded) reach callers.
DispatchFailed is absorbed by the workflow engine.
"""


class FeedbackError(Exception):
    """Base class for every caller-visible workflow error."""

    retryable = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def to_error_payload(self) -> dict:
        """Error object for the response contract: {"message", "type"}."""
        return {"message": self.message, "type": self.kind}


class PreconditionFailed(FeedbackError):
    """Input rejected before any outbound call is made."""


class EmptyFeedback(PreconditionFailed):
    pass


class InputTooLarge(PreconditionFailed):
    pass


class ClassifierUnavailable(FeedbackError):
    """Classification capability unreachable or failed at transport level."""

    retryable = True


class ClassifierRejected(FeedbackError):
    """Classification capability understood the request but could not classify it."""


class DispatchFailed(FeedbackError):
    """Support notification could not be published. Never surfaced to callers."""


class DeadlineExceeded(FeedbackError):
    pass


class ConfigurationError(FeedbackError):
    """Raised at startup when required settings are missing."""


# Failure kinds the workflow engine may capture, mapped back to their error class
FAILURE_KINDS = {
    cls.__name__: cls
    for cls in (EmptyFeedback, InputTooLarge, ClassifierUnavailable, ClassifierRejected)
}
