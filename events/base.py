from datetime import datetime
from decimal import Decimal
from enum import Enum


class EventType(str, Enum):
    ORDER_CREATED = "order.created"
    PROMO_CODE_APPLIED = "promo_code.applied"


class DomainEvent:
    """
    Base for events shipped through the bus. Subclasses set ``event_type``
    and implement ``to_payload`` / ``from_payload`` with JSON-safe values.
    """

    event_type = None

    def to_payload(self):
        raise NotImplementedError

    @classmethod
    def from_payload(cls, payload):
        raise NotImplementedError

    def to_envelope(self):
        return {"type": self.event_type.value, "payload": self.to_payload()}

    def __eq__(self, other):
        return type(self) is type(other) and self.to_payload() == other.to_payload()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_payload()!r})"


def encode_decimal(value):
    return None if value is None else str(value)


def decode_decimal(value):
    return None if value is None else Decimal(value)


def encode_datetime(value):
    return value.isoformat()


def decode_datetime(value):
    return datetime.fromisoformat(value)
