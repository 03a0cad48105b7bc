"""
Sentiment Classifier Adapter.

Wraps an external text-classification capability behind `classify(text, language_hint)`.
Each call issues exactly one outbound request; retries belong to the gateway.
"""

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from langchain_anthropic import ChatAnthropic
from langchain_core.exceptions import OutputParserException
from pydantic import ValidationError

from prompts import CLASSIFIER_SYSTEM_PROMPT
from src.errors import ClassifierRejected, ClassifierUnavailable, ConfigurationError, EmptyFeedback, InputTooLarge
from src.logger import log_event
from src.models import ClassificationResult, SentimentDetection, WorkflowConfig, normalize_label

# Comprehend error codes meaning "understood, but cannot classify"
REJECTED_ERROR_CODES = {
    "UnsupportedLanguageException",
    "TextSizeLimitExceededException",
    "InvalidRequestException",
    "ValidationException",
}


def validate_feedback_text(text, max_input_bytes: int) -> str:
    """
    Check feedback text against the capability's input constraints.

    Never truncates: oversize input raises InputTooLarge so callers see deterministic behavior.
    """
    if not isinstance(text, str) or not text.strip():
        raise EmptyFeedback("Feedback text must be a non-empty string")

    size = len(text.encode("utf-8"))
    if size > max_input_bytes:
        raise InputTooLarge(f"Feedback text is {size} bytes, limit is {max_input_bytes}")

    return text


class SentimentClassifier:
    """Base adapter. Subclasses implement `_detect` with one outbound call."""

    backend = "base"

    def __init__(self, language_code: str = "en", max_input_bytes: int = 5000):
        self.language_code = language_code
        self.max_input_bytes = max_input_bytes

    def classify(self, text: str, language_hint: str = None) -> ClassificationResult:
        validate_feedback_text(text, self.max_input_bytes)
        language_code = language_hint or self.language_code

        sentiment = normalize_label(self._detect(text, language_code))
        log_event("classified", backend=self.backend, sentiment=sentiment, language=language_code)
        return ClassificationResult(sentiment=sentiment, text=text, language_code=language_code)

    def _detect(self, text: str, language_code: str) -> str:
        raise NotImplementedError


class AnthropicSentimentClassifier(SentimentClassifier):
    """LLM-backed classifier using structured output."""

    backend = "anthropic"

    def __init__(self, model: str, timeout_seconds: float = 5.0, llm=None, **kwargs):
        super().__init__(**kwargs)
        if llm is None:
            # SDK retries disabled: one outbound call per classification
            llm = ChatAnthropic(model=model, timeout=timeout_seconds, max_retries=0)
        self._structured_llm = llm.with_structured_output(SentimentDetection)

    def _detect(self, text: str, language_code: str) -> str:
        try:
            result = self._structured_llm.invoke([
                {"role": "system", "content": CLASSIFIER_SYSTEM_PROMPT},
                {"role": "user", "content": f"Language code: {language_code}\n\nFeedback:\n{text}"}
            ])
        except (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError) as e:
            raise ClassifierUnavailable(f"{type(e).__name__}: {str(e)[:200]}") from e
        except APIStatusError as e:
            if e.status_code >= 500:
                raise ClassifierUnavailable(f"HTTP {e.status_code}: {str(e)[:200]}") from e
            raise ClassifierRejected(f"HTTP {e.status_code}: {str(e)[:200]}") from e
        except (OutputParserException, ValidationError) as e:
            raise ClassifierRejected(f"Unparseable classification: {str(e)[:200]}") from e

        if result is None:
            raise ClassifierRejected("Classifier returned no result")
        if not result.supported:
            raise ClassifierRejected(f"Text cannot be classified for language '{language_code}'")

        return result.sentiment


class ComprehendSentimentClassifier(SentimentClassifier):
    """AWS Comprehend DetectSentiment classifier."""

    backend = "comprehend"

    def __init__(self, region: str, timeout_seconds: float = 5.0, client=None, **kwargs):
        super().__init__(**kwargs)
        if client is None:
            client = boto3.client(
                "comprehend",
                region_name=region,
                config=Config(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={"total_max_attempts": 1},
                ),
            )
        self.client = client

    def _detect(self, text: str, language_code: str) -> str:
        try:
            response = self.client.detect_sentiment(Text=text, LanguageCode=language_code)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in REJECTED_ERROR_CODES:
                raise ClassifierRejected(f"{code}: {e}") from e
            raise ClassifierUnavailable(f"{code}: {e}") from e
        except BotoCoreError as e:
            raise ClassifierUnavailable(f"{type(e).__name__}: {e}") from e

        sentiment = response.get("Sentiment")
        if not sentiment:
            raise ClassifierRejected("Comprehend response carried no Sentiment")
        return sentiment


def create_classifier(config: WorkflowConfig) -> SentimentClassifier:
    """Build the classifier selected by `config.classifier_backend`."""
    common = {"language_code": config.language_code, "max_input_bytes": config.max_input_bytes}

    if config.classifier_backend == "anthropic":
        return AnthropicSentimentClassifier(
            model=config.classification_model,
            timeout_seconds=config.classifier_timeout_seconds,
            **common,
        )
    if config.classifier_backend == "comprehend":
        return ComprehendSentimentClassifier(
            region=config.aws_region,
            timeout_seconds=config.classifier_timeout_seconds,
            **common,
        )
    raise ConfigurationError(f"Unknown classifier backend: {config.classifier_backend}")
