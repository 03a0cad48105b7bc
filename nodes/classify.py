from src.errors import ClassifierRejected, FeedbackError
from src.logger import log
from src.models import FeedbackState


def classify(state: FeedbackState, classifier) -> dict:
    """
    Classify the feedback text with the injected classifier adapter.

    Returns dict with classification and status "classified", or the captured
    failure kind with status "failed". No retry here: the gateway owns the retry policy.
    """
    try:
        result = classifier.classify(state["feedback_text"], state["language_code"])

    except FeedbackError as e:
        log(f"\n Classification failed: {e.kind}")
        log(f"    Error: {e.message[:200]}")  # Truncate long error messages
        return {"status": "failed", "failure_kind": e.kind, "failure_message": e.message}

    except Exception as e:
        # Unexpected error: permanent, the gateway does not retry it
        log(f"\n Unexpected classification error: {type(e).__name__}")
        log(f"    Error: {str(e)[:200]}")
        return {
            "status": "failed",
            "failure_kind": ClassifierRejected.__name__,
            "failure_message": f"Unexpected classification error: {type(e).__name__}",
        }

    return {"classification": result, "status": "classified"}
