"""
Payment status rules.

    pending  --overdue-->  overdue
    pending  --pay------>  paid
    overdue  --pay------>  paid
    paid     --refund--->  refunded

Every status change goes through transition().
"""
from core.constants import PaymentStatus
from core.exceptions import InvalidStateTransitionError


class PaymentEvent:
    MARK_OVERDUE = 'mark_overdue'
    PAY = 'pay'
    REFUND = 'refund'


_TRANSITIONS = {
    (PaymentStatus.PENDING, PaymentEvent.MARK_OVERDUE): PaymentStatus.OVERDUE,
    (PaymentStatus.PENDING, PaymentEvent.PAY): PaymentStatus.PAID,
    (PaymentStatus.OVERDUE, PaymentEvent.PAY): PaymentStatus.PAID,
    (PaymentStatus.PAID, PaymentEvent.REFUND): PaymentStatus.REFUNDED,
}

_MESSAGES = {
    PaymentEvent.PAY: "Payment is already marked as paid",
    PaymentEvent.REFUND: "Only paid payments can be refunded",
    PaymentEvent.MARK_OVERDUE: "Only pending payments can become overdue",
}


def can_transition(current: str, event: str) -> bool:
    return (current, event) in _TRANSITIONS


def transition(current: str, event: str) -> str:
    """Return the next payment status or raise InvalidStateTransitionError"""
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError:
        message = _MESSAGES.get(event, f"Unknown payment event: {event}")
        if event == PaymentEvent.PAY and current == PaymentStatus.REFUNDED:
            message = "Refunded payments cannot be marked as paid"
        raise InvalidStateTransitionError(message=message, current_status=current, event=event) from None
