"""Queue-triggered ingestion of UPI payment notifications.

The broker owns delivery, retries and dead-lettering. A handler call that
returns means "acknowledge"; a handler call that raises means "this delivery
failed", and the broker decides whether to redeliver or dead-letter.
Redelivery of an already recorded notification is absorbed as a duplicate.

Run as a module to replay messages (one JSON document per line), e.g. stored
``raw_payload`` values or a dead-letter export:

    python -m expense_tracker.workers.payment_queue --file dead_letters.jsonl
"""
import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import Settings, get_settings
from ..dependencies import build_store
from ..errors import MalformedPayloadError, StoreError, ValidationError
from ..logging_config import configure_logging
from ..services.ingestion_service import Created, IngestionService, IngestResult

logger = logging.getLogger(__name__)

QUEUE_NAME = "upi-payments"


@dataclass
class BatchOutcome:
    completed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class PaymentQueueHandler:
    """Process one queue message per call, delegating to IngestionService."""

    def __init__(self, service: IngestionService):
        self.service = service

    def handle(self, message_body: str) -> IngestResult:
        logger.info("Processing UPI payment from queue %s.", QUEUE_NAME)
        try:
            result = self.service.ingest(message_body)
        except (MalformedPayloadError, ValidationError) as e:
            logger.error("Invalid payment message, giving it back to the broker: %s", e)
            raise
        except StoreError:
            logger.exception("Error processing UPI payment from queue")
            raise

        if isinstance(result, Created):
            logger.info(
                "Expense created from queue. Transaction ID: %s, Amount: %s %s",
                result.record.transaction_id,
                result.record.amount,
                result.record.currency,
            )
        else:
            logger.warning(
                "Skipping duplicate transaction from queue: %s", result.transaction_id
            )
        return result

    def handle_batch(self, messages: Iterable[Tuple[str, str]]) -> BatchOutcome:
        """Handle ``(message_id, body)`` pairs independently.

        A failing message does not stop the batch; its id is reported in
        ``failed`` with the error type so the host can abandon just that one.
        """
        outcome = BatchOutcome()
        for message_id, body in messages:
            try:
                self.handle(body)
            except (MalformedPayloadError, ValidationError, StoreError) as e:
                outcome.failed[message_id] = type(e).__name__
            except Exception as e:
                logger.exception("Unexpected error processing queue message %s", message_id)
                outcome.failed[message_id] = type(e).__name__
            else:
                outcome.completed.append(message_id)
        return outcome


def create_handler(settings: Optional[Settings] = None) -> PaymentQueueHandler:
    settings = settings or get_settings()
    return PaymentQueueHandler(IngestionService(build_store(settings)))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay UPI payment messages")
    parser.add_argument(
        "--file",
        type=argparse.FileType("r", encoding="utf-8"),
        default=sys.stdin,
        help="File with one JSON message per line (default: stdin)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    handler = create_handler(settings)

    lines = (line.strip() for line in args.file)
    messages = [(f"line-{n}", line) for n, line in enumerate(lines, 1) if line]
    outcome = handler.handle_batch(messages)

    logger.info(
        "Replay finished: %d completed, %d failed", len(outcome.completed), len(outcome.failed)
    )
    for message_id, error in outcome.failed.items():
        logger.error("%s failed: %s", message_id, error)
    return 1 if outcome.failed else 0


if __name__ == "__main__":
    sys.exit(main())
