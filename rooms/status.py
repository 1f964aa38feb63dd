"""
Room status rules.

All room status changes go through transition(); callers never assign
Room.status directly. Occupancy-driven changes only ever move a room between
available and occupied. Maintenance, reserved and unavailable are set by staff
and left alone by assignments.
"""
from core.constants import RoomStatus
from core.exceptions import InvalidStateTransitionError


class RoomEvent:
    OCCUPANCY_CHANGED = 'occupancy_changed'
    START_MAINTENANCE = 'start_maintenance'
    COMPLETE_MAINTENANCE = 'complete_maintenance'
    RESERVE = 'reserve'
    MARK_UNAVAILABLE = 'mark_unavailable'
    RELEASE = 'release'


# event -> statuses it may be applied from
_ALLOWED_FROM = {
    RoomEvent.START_MAINTENANCE: (RoomStatus.AVAILABLE, RoomStatus.OCCUPIED, RoomStatus.RESERVED,
                                  RoomStatus.UNAVAILABLE),
    RoomEvent.COMPLETE_MAINTENANCE: (RoomStatus.MAINTENANCE,),
    RoomEvent.RESERVE: (RoomStatus.AVAILABLE,),
    RoomEvent.MARK_UNAVAILABLE: (RoomStatus.AVAILABLE, RoomStatus.OCCUPIED, RoomStatus.RESERVED,
                                 RoomStatus.MAINTENANCE),
    RoomEvent.RELEASE: (RoomStatus.RESERVED, RoomStatus.UNAVAILABLE),
}

# target status requested by staff -> event
STATUS_EVENTS = {
    RoomStatus.MAINTENANCE: RoomEvent.START_MAINTENANCE,
    RoomStatus.RESERVED: RoomEvent.RESERVE,
    RoomStatus.UNAVAILABLE: RoomEvent.MARK_UNAVAILABLE,
}


def occupancy_status(active_count: int, capacity: int) -> str:
    """Status a room has purely from its head count"""
    return RoomStatus.OCCUPIED if active_count >= capacity else RoomStatus.AVAILABLE


def derive_status(current: str, active_count: int, capacity: int) -> str:
    """Re-evaluate status after an assignment or unassignment"""
    if current in RoomStatus.MANUAL:
        return current
    return occupancy_status(active_count, capacity)


def transition(current: str, event: str, active_count: int, capacity: int) -> str:
    """
    Return the room's next status for an event.

    Raises InvalidStateTransitionError when the event is not allowed from the
    current status.
    """
    if event == RoomEvent.OCCUPANCY_CHANGED:
        return derive_status(current, active_count, capacity)

    allowed = _ALLOWED_FROM.get(event)
    if allowed is None:
        raise InvalidStateTransitionError(
            message=f"Unknown room event: {event}", current_status=current, event=event
        )
    if current not in allowed:
        raise InvalidStateTransitionError(
            message=f"Cannot {event.replace('_', ' ')} a room that is {current}",
            current_status=current,
            event=event,
        )

    if event == RoomEvent.START_MAINTENANCE:
        return RoomStatus.MAINTENANCE
    if event == RoomEvent.MARK_UNAVAILABLE:
        return RoomStatus.UNAVAILABLE
    if event == RoomEvent.RESERVE:
        if active_count >= capacity:
            raise InvalidStateTransitionError(
                message="Cannot reserve a room that is full", current_status=current, event=event
            )
        return RoomStatus.RESERVED
    # COMPLETE_MAINTENANCE and RELEASE hand the room back to occupancy rules
    return occupancy_status(active_count, capacity)
