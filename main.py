import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from src.logger import log, log_invocation_start, log_invocation_end


def read_feedback(args) -> str:
    """Feedback text from the positional argument or stdin."""
    if args.stdin:
        return sys.stdin.read()
    return args.text or ""


def subscribe(address: str) -> int:
    """Subscribe an e-mail address to the support topic."""
    from src.dispatcher import create_dispatcher
    from src.errors import FeedbackError
    from src.models import WorkflowConfig

    try:
        dispatcher = create_dispatcher(WorkflowConfig.from_settings())
        subscription_arn = dispatcher.subscribe_email(address)
    except FeedbackError as e:
        log(f"Error: {e.message}")
        return 1

    log(f"Subscription requested for {address}: {subscription_arn}")
    log("The address must confirm the subscription e-mail before it receives notifications.")
    return 0


def main():
    import argparse

    parser = argparse.ArgumentParser(
        description="Classify one piece of feedback and notify support on non-positive sentiment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py "This product is wonderful"
  echo "This is terrible, I want a refund" | python main.py --stdin
  python main.py "Das ist schlecht" --language de --deadline 5
  python main.py --subscribe support@example.com
        """
    )
    parser.add_argument("text", nargs="?", help="Feedback text")
    parser.add_argument("--stdin", action="store_true", help="Read the feedback text from stdin")
    parser.add_argument("--language", default=None, help="Language code hint (default: LANGUAGE_CODE setting)")
    parser.add_argument("--deadline", type=float, default=None,
                        help="Time budget in seconds (default: DEADLINE_SECONDS setting)")
    parser.add_argument("--subscribe", metavar="EMAIL", help="Subscribe an e-mail address to the support topic and exit")

    args = parser.parse_args()

    if args.subscribe:
        sys.exit(subscribe(args.subscribe))

    from src.errors import ConfigurationError
    from src.gateway import build_gateway
    from src.models import WorkflowConfig

    config = WorkflowConfig.from_settings()

    # Validate API key is set
    if config.classifier_backend == "anthropic" and not os.environ.get("ANTHROPIC_API_KEY"):
        log("Error: ANTHROPIC_API_KEY environment variable not set")
        log("\nPlease set your API key:")
        log("  export ANTHROPIC_API_KEY=your_key_here")
        log("\nOr add to .env file:")
        log("  ANTHROPIC_API_KEY=your_key_here")
        sys.exit(1)

    try:
        gateway = build_gateway(config)
    except ConfigurationError as e:
        log(f"Error: {e.message}")
        sys.exit(1)

    log_invocation_start()
    try:
        event = {"input": read_feedback(args)}
        if args.language:
            event["language_code"] = args.language
        response = gateway.handle(event, deadline=args.deadline)
    finally:
        gateway.close()
        log_invocation_end()

    print(json.dumps(response, indent=2))
    sys.exit(0 if response["status"] == "SUCCEEDED" else 1)


if __name__ == "__main__":
    main()
