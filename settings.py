"""
Configuration for the feedback sentiment workflow.

Every value can be overridden through the environment (or a .env file, loaded by main.py).
"""

import os

# Classification back end: "anthropic" (LLM with structured output) or "comprehend" (AWS Comprehend)
CLASSIFIER_BACKEND = os.getenv("CLASSIFIER_BACKEND", "anthropic")
CLASSIFICATION_MODEL = os.getenv("CLASSIFICATION_MODEL", "claude-haiku-4-5-20251001")  # Sentiment is a simple labelling task, Haiku is enough
LANGUAGE_CODE = os.getenv("LANGUAGE_CODE", "en")

# Branching
POSITIVE_LABEL = os.getenv("POSITIVE_LABEL", "POSITIVE")  # Exact match; every other label notifies support

# Support notification (pre-provisioned SNS topic)
AWS_REGION = os.getenv("AWS_REGION", "eu-central-1")
SUPPORT_TOPIC_ARN = os.getenv("SUPPORT_TOPIC_ARN", "")
NOTIFICATION_HEADER = os.getenv("NOTIFICATION_HEADER", "Negative feedback detected.")
NOTIFICATION_SUBJECT = os.getenv("NOTIFICATION_SUBJECT", "Customer feedback needs attention")

# Limits and timeouts
MAX_INPUT_BYTES = int(os.getenv("MAX_INPUT_BYTES", "5000"))  # AWS Comprehend DetectSentiment limit (UTF-8 bytes)
CLASSIFIER_TIMEOUT_SECONDS = float(os.getenv("CLASSIFIER_TIMEOUT_SECONDS", "5"))
DISPATCH_TIMEOUT_SECONDS = float(os.getenv("DISPATCH_TIMEOUT_SECONDS", "5"))
DEADLINE_SECONDS = float(os.getenv("DEADLINE_SECONDS", "10"))

# Gateway retry policy (classification only)
MAX_CLASSIFY_ATTEMPTS = int(os.getenv("MAX_CLASSIFY_ATTEMPTS", "3"))
RETRY_BACKOFF_SECONDS = float(os.getenv("RETRY_BACKOFF_SECONDS", "0.2"))
RETRY_BACKOFF_MAX_SECONDS = float(os.getenv("RETRY_BACKOFF_MAX_SECONDS", "2"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "feedback_workflow.log")
