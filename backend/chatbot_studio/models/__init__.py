"""SQLAlchemy models"""
from chatbot_studio.models.user import User, UserRole, RefreshToken
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.knowledge import Intent, FAQ
from chatbot_studio.models.document import Document, DocumentStatus
from chatbot_studio.models.conversation import Conversation, Message, MessageRole
from chatbot_studio.models.lead import Lead, LeadCampaign, LeadStatus
from chatbot_studio.models.integration import Integration, IntegrationConfig
from chatbot_studio.models.subscription import Plan, Subscription, SubscriptionStatus
from chatbot_studio.models.notification import Notification
from chatbot_studio.models.analytics import Analytics, AnalyticsMetric

__all__ = [
    "User",
    "UserRole",
    "RefreshToken",
    "Bot",
    "Intent",
    "FAQ",
    "Document",
    "DocumentStatus",
    "Conversation",
    "Message",
    "MessageRole",
    "Lead",
    "LeadCampaign",
    "LeadStatus",
    "Integration",
    "IntegrationConfig",
    "Plan",
    "Subscription",
    "SubscriptionStatus",
    "Notification",
    "Analytics",
    "AnalyticsMetric",
]
