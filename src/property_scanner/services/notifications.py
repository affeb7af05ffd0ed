"""Deal alert rendering and dispatch."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateError
from markupsafe import escape

from ..models.listing import ScoredListing
from .email_sender import MailTransport

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def _money(value) -> str:
    return f"${value:,.0f}"


class NotificationDispatcher:
    """
    Render and send investment alerts for qualifying listings.

    Sending never raises: transport failures are logged and reported as
    False so a scan is never aborted by email problems.
    """

    ALERT_TEMPLATE = "deal_alert.html"

    def __init__(
        self,
        transport: MailTransport,
        recipient: Optional[str],
        template_dir: Optional[str] = None,
    ):
        self.transport = transport
        self.recipient = recipient
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR

        if self.template_dir.exists():
            self.jinja_env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                autoescape=True,
            )
            self.jinja_env.filters["money"] = _money
        else:
            self.jinja_env = None
            logger.warning(f"Template directory not found: {self.template_dir}")

    def build_subject(self, listing: ScoredListing) -> str:
        return f"Investment Opportunity: {listing.address} - Score {listing.score}/100"

    def render_alert(self, listing: ScoredListing) -> str:
        """Render the alert body, falling back to inline HTML."""
        if self.jinja_env is None:
            return self._generate_fallback_html(listing)

        try:
            template = self.jinja_env.get_template(self.ALERT_TEMPLATE)
            return template.render(listing=listing, expenses=listing.expense_breakdown())
        except TemplateError as e:
            logger.warning(f"Failed to render template: {e}")
            return self._generate_fallback_html(listing)

    def _generate_fallback_html(self, listing: ScoredListing) -> str:
        """Inline HTML used when the template is unavailable; provider text is escaped."""
        rows = "".join(
            f"<p>{label}: {_money(amount)}</p>" for label, amount in listing.expense_breakdown().items()
        )
        return f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2 style="color: #2563eb;">New Investment Opportunity Found!</h2>
            <h3>{escape(listing.address)}</h3>
            <p>{escape(listing.location())}</p>
            <p><strong>Investment Score: {listing.score}/100</strong></p>
            <p>Price: {_money(listing.price)}</p>
            <p>Estimated Rent: {_money(listing.estimated_rent)}/mo</p>
            <p>Monthly Cash Flow: {_money(listing.cash_flow)}/mo</p>
            <p>Cap Rate: {listing.cap_rate}% | Rent Ratio: {listing.rent_ratio}% | ROI: {listing.roi}%</p>
            {rows}
            <p><strong>Total Expenses: {_money(listing.total_expenses)}/mo</strong></p>
        </body>
        </html>
        """

    async def send_deal_alert(self, listing: ScoredListing) -> bool:
        """
        Send an alert for one qualifying listing.

        Returns:
            True if the transport accepted the message
        """
        if not self.recipient:
            logger.warning("No alert recipient configured (set ALERT_EMAIL)")
            return False

        subject = self.build_subject(listing)
        body = self.render_alert(listing)
        return await self._deliver(subject, body, context=listing.address)

    async def send_test_notification(self) -> bool:
        """Send a short email to verify the mail configuration."""
        if not self.recipient:
            logger.error("No alert recipient configured (set ALERT_EMAIL)")
            return False

        body = f"""
        <html>
        <body style="font-family: Arial, sans-serif;">
            <h2 style="color: #2563eb;">Property Scanner - Test Email</h2>
            <p>Your Property Scanner email configuration is working correctly!</p>
            <p>Time: {datetime.now():%Y-%m-%d %H:%M:%S}</p>
        </body>
        </html>
        """
        return await self._deliver("Property Scanner - Test Email", body, context="test email")

    async def _deliver(self, subject: str, body: str, context: str) -> bool:
        try:
            sent = await self.transport.send(self.recipient, subject, body)
        except Exception as e:
            logger.error(f"Failed to send alert for {context}: {e}")
            return False

        if sent:
            logger.info(f"Alert sent for {context}")
        else:
            logger.error(f"Mail transport rejected alert for {context}")
        return bool(sent)
