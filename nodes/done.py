from src.models import FeedbackState


def done(state: FeedbackState) -> dict:
    """Terminal success state."""
    return {"notified": state.get("notified", False), "status": "done"}
