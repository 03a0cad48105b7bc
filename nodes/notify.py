from src.dispatcher import dispatch_best_effort
from src.logger import log_event
from src.models import FeedbackState, NotificationMessage


def notify(state: FeedbackState, dispatcher, header: str, submit=None) -> dict:
    """
    Build one NotificationMessage and hand it to the dispatcher, best-effort.

    With `submit` the dispatch is detached: handed off once and never awaited,
    so a slow publish cannot hold up the outcome.
    The disposition is "notification attempted" whatever the dispatch outcome.
    """
    message = NotificationMessage.from_classification(state["classification"], header)

    detached = False
    if submit is not None:
        try:
            submit(dispatch_best_effort, dispatcher, message)
            detached = True
        except RuntimeError:
            # Engine already closed, dispatch inline instead
            pass

    if detached:
        log_event("notification_detached", sentiment=message.sentiment)
    else:
        dispatch_best_effort(dispatcher, message)

    return {"notified": True, "status": "notifying"}
