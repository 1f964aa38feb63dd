"""
Custom exceptions for the occupancy and billing engine.
Each failure the services can report has its own exception type so callers
(the API layer, management commands, the scheduler) can tell them apart.
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    default_code = "APPLICATION_ERROR"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationException):
    """Raised when structural data validation fails"""
    default_message = "Validation failed"
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationException):
    """Raised when a room, tenant or payment does not exist"""
    default_message = "Resource not found"
    default_code = "NOT_FOUND"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type and 'message' not in kwargs:
            kwargs['message'] = f"{resource_type} not found"
        kwargs.setdefault('details', {'resource': resource_type, 'id': resource_id})
        super().__init__(**kwargs)


class PermissionDeniedError(BaseApplicationException):
    """Raised when user doesn't have permission"""
    default_message = "Permission denied"
    default_code = "PERMISSION_DENIED"


class BusinessLogicError(BaseApplicationException):
    """Raised when business rule is violated"""
    default_message = "Business rule violation"
    default_code = "BUSINESS_RULE_VIOLATION"


class CapacityExceededError(BusinessLogicError):
    """Raised when an assignment would overfill a room or the room is not assignable"""
    default_message = "Room is at full capacity"
    default_code = "CAPACITY_EXCEEDED"


class DuplicateAssignmentError(BusinessLogicError):
    """Raised when a tenant already holds an active tenancy"""
    default_message = "Tenant is already assigned to a room"
    default_code = "DUPLICATE_ASSIGNMENT"


class InvalidStateTransitionError(BusinessLogicError):
    """Raised when an action is not allowed from the current status"""
    default_message = "Invalid state transition"
    default_code = "INVALID_STATE_TRANSITION"

    def __init__(self, message=None, current_status=None, event=None, **kwargs):
        self.current_status = current_status
        self.event = event
        details = kwargs.pop('details', None) or {}
        if current_status is not None:
            details.setdefault('current_status', current_status)
        if event is not None:
            details.setdefault('event', event)
        super().__init__(message=message, details=details, **kwargs)
