"""Kafka sink for credit alerts.

Records are JSON encoded. ``Event`` envelopes are keyed by their subject
(the credit ID) so every alert for a credit lands on the same partition,
and optionally carry CloudEvents binary-mode headers (``ce_*``).
"""

import json
import logging
from dataclasses import dataclass, is_dataclass
from typing import Any, Iterable

from confluent_kafka import KafkaException, Producer

from cobranza.config import KafkaConfig
from cobranza.exceptions import SinkError
from cobranza.models import Event
from cobranza.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

CLOUDEVENTS_SPEC_VERSION = "1.0"


@dataclass
class DeliveryStats:
    """Counters fed by produce calls and delivery reports."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def pending(self) -> int:
        return self.sent - self.delivered - self.failed

    @property
    def success_rate(self) -> float:
        finished = self.delivered + self.failed
        return self.delivered / finished if finished else 0.0

    def __str__(self) -> str:
        return f"sent={self.sent}, delivered={self.delivered}, failed={self.failed}"


def message_key(record: Any) -> str | None:
    """Partition key: event subject, else the record's credit_id."""
    if isinstance(record, Event):
        return record.subject
    if isinstance(record, dict):
        return record.get("credit_id")
    if is_dataclass(record):
        return getattr(record, "credit_id", None)
    return None


def cloudevents_headers(event: Event) -> list[tuple[str, bytes]]:
    """CloudEvents binary-mode attributes of an event."""
    return [
        ("ce_specversion", CLOUDEVENTS_SPEC_VERSION.encode()),
        ("ce_id", event.event_id.encode("utf-8")),
        ("ce_type", event.event_type.encode("utf-8")),
        ("ce_source", event.source.encode("utf-8")),
        ("ce_subject", event.subject.encode("utf-8")),
        ("ce_time", event.event_time.isoformat().encode()),
        ("content-type", b"application/json"),
    ]


class KafkaSink:
    """Publish records to Kafka.

    Parameters
    ----------
    config : KafkaConfig | str
        Producer configuration or a bootstrap servers string.
    use_cloudevents : bool
        Attach CloudEvents headers to ``Event`` records (default: True).
    """

    def __init__(self, config: KafkaConfig | str, use_cloudevents: bool = True) -> None:
        self.config = KafkaConfig(bootstrap_servers=config) if isinstance(config, str) else config
        self.use_cloudevents = use_cloudevents
        try:
            self.producer = Producer(self.config.to_dict())
        except KafkaException as e:
            raise SinkError(f"Cannot create Kafka producer: {e}") from e
        self.stats = DeliveryStats()

    def _on_delivery(self, err: Any, msg: Any) -> None:
        if err is not None:
            self.stats.failed += 1
            logger.error("Alert delivery failed: %s", err)
            return
        self.stats.delivered += 1
        logger.debug("Alert delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Queue one record.

        Raises
        ------
        SinkError
            If the producer rejects the message (queue full, broker error).
        """
        if key is None:
            key = message_key(record)
        headers = cloudevents_headers(record) if self.use_cloudevents and isinstance(record, Event) else None
        payload = json.dumps(to_dict(record), ensure_ascii=False, default=str)

        try:
            self.producer.produce(
                topic=topic,
                key=str(key).encode("utf-8") if key is not None else None,
                value=payload.encode("utf-8"),
                headers=headers,
                on_delivery=self._on_delivery,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Cannot produce to {topic}: {e}") from e

        self.stats.sent += 1
        # Serve delivery callbacks of earlier messages
        self.producer.poll(0)

    def write_batch(self, topic: str, records: Iterable[Any]) -> int:
        """Queue every record, then wait for delivery. Returns the number queued."""
        before = self.stats.sent
        for record in records:
            self.send(topic, record)
        self.flush()

        count = self.stats.sent - before
        logger.info("Published %d records to %s (%s)", count, topic, self.stats)
        return count

    def publish_alerts(self, events: Iterable[Event], topic: str | None = None) -> int:
        """Publish attention events to ``topic`` or the configured alerts topic."""
        return self.write_batch(topic or self.config.topic, events)

    def flush(self, timeout: float = 30.0) -> None:
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still queued after flush", remaining)

    def close(self) -> None:
        self.flush()
        logger.info("Kafka sink closed: %s, success rate %.1f%%", self.stats, self.stats.success_rate * 100)
