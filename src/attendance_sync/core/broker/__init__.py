"""Message broker adapters."""

from attendance_sync.core.broker.kafka import KafkaMessageConsumer

__all__ = ["KafkaMessageConsumer"]
