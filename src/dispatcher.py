"""
Notification Dispatcher.

Publishes support notifications to a fixed, pre-provisioned SNS topic.
Dispatch is best-effort: `dispatch_best_effort` records failures and never raises.
"""

from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.errors import ConfigurationError, DispatchFailed
from src.logger import log_event
from src.models import DispatchReceipt, NotificationMessage, WorkflowConfig


class NotificationDispatcher:
    """Base dispatcher. `publish` returns a receipt or raises DispatchFailed."""

    def publish(self, message: NotificationMessage) -> DispatchReceipt:
        raise NotImplementedError


class SNSDispatcher(NotificationDispatcher):
    """Send support notifications via AWS SNS."""

    def __init__(self, topic_arn: str, region: str = "eu-central-1", subject: str = "Customer feedback needs attention",
                 timeout_seconds: float = 5.0, client=None):
        """
        Args:
            topic_arn: ARN of the support topic (subscribers are provisioned on the topic)
            region: AWS region of the topic
            subject: Subject line for e-mail subscribers
            timeout_seconds: Per-call connect/read timeout
            client: Pre-built SNS client (tests)
        """
        self.topic_arn = topic_arn
        self.region = region
        self.subject = subject
        if client is None:
            client = boto3.client(
                "sns",
                region_name=region,
                config=Config(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={"total_max_attempts": 1},
                ),
            )
        self.sns_client = client

    def publish(self, message: NotificationMessage) -> DispatchReceipt:
        try:
            response = self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=self.subject[:100],
                Message=message.to_body(),
                MessageAttributes={
                    "sentiment": {"DataType": "String", "StringValue": message.sentiment}
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise DispatchFailed(f"SNS publish to {self.topic_arn} failed: {e}") from e

        receipt = DispatchReceipt(message_id=response["MessageId"])
        log_event("notification_sent", topic_arn=self.topic_arn, message_id=receipt.message_id,
                  sentiment=message.sentiment)
        return receipt

    def subscribe_email(self, address: str) -> str:
        """
        Subscribe an e-mail address to the support topic.

        SNS sends a confirmation mail; the subscription stays pending until it is confirmed.
        """
        try:
            response = self.sns_client.subscribe(
                TopicArn=self.topic_arn,
                Protocol="email",
                Endpoint=address,
                ReturnSubscriptionArn=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise DispatchFailed(f"SNS subscribe to {self.topic_arn} failed: {e}") from e

        subscription_arn = response["SubscriptionArn"]
        log_event("subscription_requested", topic_arn=self.topic_arn, endpoint=address,
                  subscription_arn=subscription_arn)
        return subscription_arn


def dispatch_best_effort(dispatcher: NotificationDispatcher, message: NotificationMessage) -> Optional[DispatchReceipt]:
    """
    Publish and absorb any failure.

    Returns:
        The receipt, or None if dispatch failed (failure is logged, never raised)
    """
    try:
        return dispatcher.publish(message)
    except DispatchFailed as e:
        log_event("dispatch_failed", kind=e.kind, error=e.message[:200], sentiment=message.sentiment)
    except Exception as e:
        log_event("dispatch_failed", kind=type(e).__name__, error=str(e)[:200], sentiment=message.sentiment)
    return None


def create_dispatcher(config: WorkflowConfig) -> SNSDispatcher:
    if not config.topic_arn:
        raise ConfigurationError("SUPPORT_TOPIC_ARN is not set")
    return SNSDispatcher(
        topic_arn=config.topic_arn,
        region=config.aws_region,
        subject=config.notification_subject,
        timeout_seconds=config.dispatch_timeout_seconds,
    )
