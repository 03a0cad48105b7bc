from src.models import FeedbackState


def route_after_classify(state: FeedbackState, positive_label: str) -> str:
    """
    Pick the next step after classification.

    Only an exact match on the positive label skips notification. Every other
    label, including ones no classifier documents yet, falls to the notify arm.
    """
    if state["status"] == "failed":
        return "failed"

    routes = {positive_label: "done"}
    return routes.get(state["classification"].sentiment, "notify")
