from langgraph.graph import StateGraph, START, END

from src.models import FeedbackState, WorkflowConfig
from nodes.classify import classify
from nodes.branch import route_after_classify
from nodes.notify import notify
from nodes.done import done


def create_graph(classifier, dispatcher, config: WorkflowConfig, submit=None):
    """
    Create the feedback workflow graph.

    classify → (positive) → done
    classify → (anything else) → notify → done
    classify → (failed) → END, no outcome

    Args:
        classifier: Sentiment classifier adapter
        dispatcher: Notification dispatcher
        config: Workflow configuration (positive label, notification header)
        submit: Callable that runs a notification dispatch detached (see FeedbackWorkflow.submit_dispatch)
    """
    workflow = StateGraph(FeedbackState)

    # Add nodes
    workflow.add_node("classify", lambda state: classify(state, classifier))
    workflow.add_node(
        "notify",
        lambda state: notify(state, dispatcher, config.notification_header, submit=submit),
    )
    workflow.add_node("done", done)

    # Add edges
    workflow.add_edge(START, "classify")
    workflow.add_conditional_edges(
        "classify",
        lambda state: route_after_classify(state, config.positive_label),
        {"failed": END, "done": "done", "notify": "notify"},
    )
    workflow.add_edge("notify", "done")
    workflow.add_edge("done", END)

    # No checkpointer: nothing is kept between invocations
    return workflow.compile()
