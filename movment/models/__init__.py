# movment/models/__init__.py
# Importing every model registers its table on Base.metadata (alembic + create_all).
from movment.models.user import User  # noqa: F401
from movment.models.event import Event, EventStatusChange  # noqa: F401
from movment.models.notification import Notification  # noqa: F401
from movment.models.conversation import ManagerConversation, ConversationMessage  # noqa: F401
from movment.models.resource import Resource  # noqa: F401
from movment.models.feedback import Feedback  # noqa: F401
from movment.models.payment import Payment  # noqa: F401
from movment.models.refund import Refund  # noqa: F401
from movment.models.promotion import Promotion  # noqa: F401
from movment.models.support_ticket import SupportTicket, SupportTicketReply  # noqa: F401
from movment.models.survey import Survey  # noqa: F401
from movment.models.manager_request import ManagerRequest  # noqa: F401
from movment.models.user_activity import UserActivity  # noqa: F401

__all__ = [
    "User",
    "Event",
    "EventStatusChange",
    "Notification",
    "ManagerConversation",
    "ConversationMessage",
    "Resource",
    "Feedback",
    "Payment",
    "Refund",
    "Promotion",
    "SupportTicket",
    "SupportTicketReply",
    "Survey",
    "ManagerRequest",
    "UserActivity",
]
