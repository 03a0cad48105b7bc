import json
from datetime import datetime, timezone
from enum import Enum
from typing import TypedDict, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

import settings


class SentimentLabel(str, Enum):
    """Labels the classification capabilities are documented to return."""
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    MIXED = "MIXED"


def normalize_label(value) -> str:
    """Upper-case a raw label; unknown labels are kept, not rejected."""
    if isinstance(value, SentimentLabel):
        return value.value
    return str(value).strip().upper()


class ClassificationResult(BaseModel):
    """Output of the classification step."""
    model_config = ConfigDict(frozen=True)

    sentiment: str
    text: str
    language_code: str


class NotificationMessage(BaseModel):
    """Support notification derived from a non-positive classification."""
    model_config = ConfigDict(frozen=True)

    header: str
    sentiment: str

    @classmethod
    def from_classification(cls, result: ClassificationResult, header: str) -> "NotificationMessage":
        return cls(header=header, sentiment=result.sentiment)

    def to_body(self) -> str:
        return json.dumps({"Message": self.header, "Detected sentiment": self.sentiment})


class DispatchReceipt(BaseModel):
    model_config = ConfigDict(frozen=True)

    message_id: str
    dispatched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WorkflowOutcome(BaseModel):
    """Terminal value of one successful invocation."""
    model_config = ConfigDict(frozen=True)

    sentiment: str
    notified: bool

    def to_payload(self) -> dict:
        return {"Sentiment": self.sentiment}


class FeedbackState(TypedDict):
    # Input
    feedback_text: str
    language_code: str

    # Classification (from classify node)
    classification: Optional[ClassificationResult]

    # Notification (from notify node)
    notified: bool

    # Failure capture (classify node, Failed terminal)
    failure_kind: Optional[str]
    failure_message: Optional[str]

    # Workflow status
    status: str  # "pending" | "classified" | "notifying" | "done" | "failed"


class SentimentDetection(BaseModel):
    """Structured output schema for the LLM sentiment classifier."""
    sentiment: Literal["POSITIVE", "NEGATIVE", "NEUTRAL", "MIXED"] = Field(
        description="Overall sentiment of the feedback"
    )
    supported: bool = Field(
        default=True,
        description="False if the text is not in a language you can classify reliably, or is not feedback at all"
    )


class WorkflowConfig(BaseModel):
    """Immutable configuration injected into the workflow engine and gateway."""
    model_config = ConfigDict(frozen=True)

    classifier_backend: Literal["anthropic", "comprehend"] = "anthropic"
    classification_model: str = "claude-haiku-4-5-20251001"
    language_code: str = "en"
    positive_label: str = SentimentLabel.POSITIVE.value

    aws_region: str = "eu-central-1"
    topic_arn: str = ""
    notification_header: str = "Negative feedback detected."
    notification_subject: str = "Customer feedback needs attention"

    max_input_bytes: int = Field(default=5000, gt=0)
    classifier_timeout_seconds: float = Field(default=5.0, gt=0)
    dispatch_timeout_seconds: float = Field(default=5.0, gt=0)
    deadline_seconds: float = Field(default=10.0, gt=0)

    max_classify_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=0.2, ge=0)
    retry_backoff_max_seconds: float = Field(default=2.0, ge=0)

    @field_validator("positive_label")
    @classmethod
    def _normalize_positive_label(cls, value: str) -> str:
        # Classifier labels are upper-cased, so the criterion must be too
        return normalize_label(value)

    @classmethod
    def from_settings(cls) -> "WorkflowConfig":
        """Snapshot the settings module into a config object."""
        return cls(
            classifier_backend=settings.CLASSIFIER_BACKEND,
            classification_model=settings.CLASSIFICATION_MODEL,
            language_code=settings.LANGUAGE_CODE,
            positive_label=settings.POSITIVE_LABEL,
            aws_region=settings.AWS_REGION,
            topic_arn=settings.SUPPORT_TOPIC_ARN,
            notification_header=settings.NOTIFICATION_HEADER,
            notification_subject=settings.NOTIFICATION_SUBJECT,
            max_input_bytes=settings.MAX_INPUT_BYTES,
            classifier_timeout_seconds=settings.CLASSIFIER_TIMEOUT_SECONDS,
            dispatch_timeout_seconds=settings.DISPATCH_TIMEOUT_SECONDS,
            deadline_seconds=settings.DEADLINE_SECONDS,
            max_classify_attempts=settings.MAX_CLASSIFY_ATTEMPTS,
            retry_backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
            retry_backoff_max_seconds=settings.RETRY_BACKOFF_MAX_SECONDS,
        )
