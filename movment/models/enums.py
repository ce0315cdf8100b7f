# movment/models/enums.py
from enum import Enum


class Role(str, Enum):
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"
    OWNER = "owner"


ELEVATED_ROLES = (Role.ADMIN.value, Role.OWNER.value)
STAFF_ROLES = (Role.MANAGER.value, Role.ADMIN.value, Role.OWNER.value)


class EventType(str, Enum):
    BIRTHDAY = "birthday"
    SURPRISE = "surprise"
    ANNIVERSARY = "anniversary"
    FAREWELL = "farewell"
    SOFTWARE_LAUNCH = "software_launch"
    CORPORATE = "corporate"
    OTHER = "other"


ADDITIONAL_SERVICES = ["decoration", "food", "equipment", "photography", "music_dj", "catering", "venue_setup"]


class EventStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    BOOKING_CONFIRMATION = "booking_confirmation"
    REMINDER = "reminder"
    UPDATE = "update"
    OFFER = "offer"
    DISCOUNT = "discount"
    SUPPORT_REPLY = "support_reply"
    GENERAL = "general"
    EMERGENCY_ALERT = "emergency_alert"


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketCategory(str, Enum):
    QUERY = "query"
    COMPLAINT = "complaint"
    FEEDBACK = "feedback"
    OTHER = "other"


class RefundStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSED = "processed"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"
    NETBANKING = "netbanking"
    SPLIT = "split"
    OTHER = "other"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class PromotionType(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"


class ResourceType(str, Enum):
    DECORATION = "decoration"
    EQUIPMENT = "equipment"
    CATERING = "catering"
    OTHER = "other"


class ManagerRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ActivityAction(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    BOOKING_CREATED = "booking_created"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_RESCHEDULED = "booking_rescheduled"
    PAYMENT = "payment"
    FEEDBACK = "feedback"
    SUPPORT_TICKET = "support_ticket"
    CHAT_MESSAGE = "chat_message"
    PROFILE_UPDATE = "profile_update"
