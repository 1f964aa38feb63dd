"""
Application-wide constants.
Centralized choice values for rooms, tenants, tenancies and payments.
"""

# User Roles
class UserRole:
    ADMIN = 'ADMIN'
    STAFF = 'STAFF'
    TENANT = 'TENANT'

    CHOICES = [
        (ADMIN, 'Admin'),
        (STAFF, 'Staff'),
        (TENANT, 'Tenant'),
    ]

    MANAGEMENT = (ADMIN, STAFF)


# Room Types
class RoomType:
    SINGLE = 'single'
    DOUBLE = 'double'
    TRIPLE = 'triple'
    QUAD = 'quad'
    SUITE = 'suite'
    STUDIO = 'studio'

    CHOICES = [
        (SINGLE, 'Single'),
        (DOUBLE, 'Double'),
        (TRIPLE, 'Triple'),
        (QUAD, 'Quad'),
        (SUITE, 'Suite'),
        (STUDIO, 'Studio'),
    ]


# Room Status
class RoomStatus:
    AVAILABLE = 'available'
    OCCUPIED = 'occupied'
    MAINTENANCE = 'maintenance'
    RESERVED = 'reserved'
    UNAVAILABLE = 'unavailable'

    CHOICES = [
        (AVAILABLE, 'Available'),
        (OCCUPIED, 'Occupied'),
        (MAINTENANCE, 'Maintenance'),
        (RESERVED, 'Reserved'),
        (UNAVAILABLE, 'Unavailable'),
    ]

    # Statuses that occupancy changes never override
    MANUAL = (MAINTENANCE, RESERVED, UNAVAILABLE)
    # Statuses that block new assignments
    NOT_ASSIGNABLE = (MAINTENANCE, UNAVAILABLE)


# Tenant Status
class TenantStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    PENDING = 'pending'
    TERMINATED = 'terminated'

    CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (PENDING, 'Pending'),
        (TERMINATED, 'Terminated'),
    ]


class IdType:
    PASSPORT = 'passport'
    DRIVERS_LICENSE = 'drivers_license'
    NATIONAL_ID = 'national_id'
    OTHER = 'other'

    CHOICES = [
        (PASSPORT, 'Passport'),
        (DRIVERS_LICENSE, "Driver's License"),
        (NATIONAL_ID, 'National ID'),
        (OTHER, 'Other'),
    ]


# Security Deposit Status
class DepositStatus:
    PENDING = 'pending'
    PAID = 'paid'
    PARTIALLY_REFUNDED = 'partially_refunded'
    REFUNDED = 'refunded'
    FORFEITED = 'forfeited'

    CHOICES = [
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (PARTIALLY_REFUNDED, 'Partially Refunded'),
        (REFUNDED, 'Refunded'),
        (FORFEITED, 'Forfeited'),
    ]

    VALUES = [value for value, _ in CHOICES]


# Payment Types
class PaymentType:
    RENT = 'rent'
    DEPOSIT = 'deposit'
    UTILITY = 'utility'
    MAINTENANCE = 'maintenance'
    PENALTY = 'penalty'
    OTHER = 'other'

    CHOICES = [
        (RENT, 'Rent'),
        (DEPOSIT, 'Deposit'),
        (UTILITY, 'Utility'),
        (MAINTENANCE, 'Maintenance'),
        (PENALTY, 'Penalty'),
        (OTHER, 'Other'),
    ]


# Payment Methods
class PaymentMethod:
    CASH = 'cash'
    BANK_TRANSFER = 'bank_transfer'
    CHECK = 'check'
    CREDIT_CARD = 'credit_card'
    DEBIT_CARD = 'debit_card'
    DIGITAL_WALLET = 'digital_wallet'
    MONEY_ORDER = 'money_order'

    CHOICES = [
        (CASH, 'Cash'),
        (BANK_TRANSFER, 'Bank Transfer'),
        (CHECK, 'Check'),
        (CREDIT_CARD, 'Credit Card'),
        (DEBIT_CARD, 'Debit Card'),
        (DIGITAL_WALLET, 'Digital Wallet'),
        (MONEY_ORDER, 'Money Order'),
    ]


# Payment Status
class PaymentStatus:
    PENDING = 'pending'
    OVERDUE = 'overdue'
    PAID = 'paid'
    REFUNDED = 'refunded'

    CHOICES = [
        (PENDING, 'Pending'),
        (OVERDUE, 'Overdue'),
        (PAID, 'Paid'),
        (REFUNDED, 'Refunded'),
    ]

    OPEN = (PENDING, OVERDUE)


# Default Limits
class DefaultLimits:
    MIN_ROOM_CAPACITY = 1
    MAX_ROOM_CAPACITY = 10
    RECEIPT_NUMBER_ATTEMPTS = 5


# Pagination
class Pagination:
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
