from .email_sender import MailTransport, SmtpMailTransport
from .metrics import analyze_listing, monthly_mortgage_payment
from .notifications import NotificationDispatcher
from .qualifier import MIN_DEAL_SCORE, is_good_deal

__all__ = [
    "MailTransport",
    "SmtpMailTransport",
    "analyze_listing",
    "monthly_mortgage_payment",
    "NotificationDispatcher",
    "MIN_DEAL_SCORE",
    "is_good_deal",
]
