import logging

import pytest

from ..errors import MalformedPayloadError, StoreError, ValidationError
from ..services.ingestion_service import Created, Duplicate, IngestionService
from ..workers.payment_queue import PaymentQueueHandler, main
from .factories import FailingStore, body


@pytest.fixture
def handler(ingestion):
    return PaymentQueueHandler(ingestion)


def test_redelivery_is_absorbed(handler, queries, caplog):
    caplog.set_level(logging.INFO, logger="expense_tracker")
    message = body()

    first = handler.handle(message)
    second = handler.handle(message)

    assert isinstance(first, Created)
    assert second == Duplicate("TX1")
    assert queries.list_expenses(queries.parse_filter()).count == 1
    assert "Skipping duplicate transaction from queue: TX1" in caplog.text


def test_malformed_message_is_raised_to_broker(handler):
    with pytest.raises(MalformedPayloadError):
        handler.handle("<xml/>")


def test_invalid_message_is_raised_to_broker(handler, queries):
    with pytest.raises(ValidationError):
        handler.handle(body(amount=-5))
    assert queries.list_expenses(queries.parse_filter()).count == 0


def test_store_failure_is_raised_for_retry():
    handler = PaymentQueueHandler(IngestionService(FailingStore()))
    with pytest.raises(StoreError):
        handler.handle(body())


def test_handle_batch_settles_messages_individually(handler):
    outcome = handler.handle_batch(
        [
            ("m1", body(transactionId="A")),
            ("m2", "{broken"),
            ("m3", body(transactionId="A")),
            ("m4", body(transactionId="B", amount=0)),
        ]
    )

    assert outcome.completed == ["m1", "m3"]
    assert outcome.failed == {"m2": "MalformedPayloadError", "m4": "ValidationError"}


def test_replay_cli(tmp_path, monkeypatch, queries, settings):
    monkeypatch.setenv("EXPENSE_DB_PATH", str(settings.db_path))
    messages = tmp_path / "messages.jsonl"
    messages.write_text(
        "\n".join([body(transactionId="R1"), "", body(transactionId="R2"), "oops"]),
        encoding="utf-8",
    )

    assert main(["--file", str(messages)]) == 1
    listed = queries.list_expenses(queries.parse_filter())
    assert {r.transaction_id for r in listed.expenses} == {"R1", "R2"}


class BrokenLookupStore(FailingStore):
    """Lookup fails with an error outside the store taxonomy."""

    def find_by_transaction_id(self, transaction_id):
        raise RuntimeError("driver bug")


def test_amount_beyond_precision_is_a_validation_error(handler):
    with pytest.raises(ValidationError):
        handler.handle(body(amount=1e30))


def test_handle_batch_continues_after_unexpected_error(handler):
    broken = PaymentQueueHandler(IngestionService(BrokenLookupStore()))
    outcome = broken.handle_batch([("m1", body(transactionId="A")), ("m2", "{broken")])

    assert outcome.failed == {"m1": "RuntimeError", "m2": "MalformedPayloadError"}

    outcome = handler.handle_batch(
        [("m1", body(transactionId="A", amount=1e30)), ("m2", body(transactionId="B"))]
    )
    assert outcome.completed == ["m2"]
    assert outcome.failed == {"m1": "ValidationError"}
