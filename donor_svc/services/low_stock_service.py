"""
Low-stock sweep: cross-reference blood inventory against the donor pool.

For every inventory item whose (area, blood group) has fewer registered
donors than the configured threshold, the matching donors get an SMS asking
them to donate. The sweep runs hourly from Celery beat, after a donor is
deleted, and on demand through the inventory API. A single-item alert also
fires when an inventory update leaves stock below its minimum level.

Failures are logged and counted, never raised and never retried.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from repositories import DonorRepository, InventoryRepository
from services.sms_service import SmsService
from core.config import LOW_STOCK_DONOR_THRESHOLD
from core.exceptions import SmsDeliveryError

logger = logging.getLogger(__name__)


@dataclass
class AlertOutcome:
    """Delivery counts for one low-stock alert."""
    recipients: int = 0
    sent: int = 0
    failed: int = 0


@dataclass
class LowStockSummary:
    """Counts for one sweep over the inventory."""
    items_checked: int = 0
    items_alerted: int = 0
    messages_sent: int = 0
    messages_failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def build_low_stock_message(item: Dict[str, Any], donor_count: int) -> str:
    return (
        f"URGENT: Low blood stock alert for {item['blood_group']} at "
        f"{item['blood_bank']} in {item['area']}. "
        f"Current stock: {item['units']} units. "
        f"Only {donor_count} donors available in your area. "
        f"Please consider donating."
    )


class LowStockService:
    """Sends low-stock alerts to donors in under-supplied (area, blood group) pairs."""

    def __init__(
        self,
        donor_repository: DonorRepository,
        inventory_repository: InventoryRepository,
        sms_service: SmsService,
        donor_threshold: Optional[int] = None
    ):
        self._donors = donor_repository
        self._inventory = inventory_repository
        self._sms = sms_service
        self.donor_threshold = (
            donor_threshold if donor_threshold is not None else LOW_STOCK_DONOR_THRESHOLD
        )

    def send_low_stock_alert(
        self,
        item: Dict[str, Any],
        donor_count: Optional[int] = None
    ) -> AlertOutcome:
        """
        Notify every donor matching the item's area and blood group.

        Never raises: an error is logged and the outcome so far is returned,
        so an inventory update that triggers the alert still succeeds.

        Args:
            item: Inventory item dict (blood_bank, area, blood_group, units).
            donor_count: Donor count quoted in the message. Defaults to the
                number of matching donors.

        Returns:
            AlertOutcome; all zeros when no donor matches.
        """
        outcome = AlertOutcome()
        try:
            self._deliver(item, donor_count, outcome)
        except Exception:
            logger.exception(
                "Error sending low stock alert",
                extra={"item_id": item.get("id"), "blood_bank": item.get("blood_bank")}
            )
        return outcome

    def _deliver(self, item: Dict[str, Any], donor_count: Optional[int], outcome: AlertOutcome) -> None:
        donors = self._donors.find(area=item["area"], blood_group=item["blood_group"])
        outcome.recipients = len(donors)
        if not donors:
            return

        message = build_low_stock_message(item, donor_count or len(donors))

        if not self._sms.is_configured:
            logger.info(
                f"Twilio not configured, low stock alert not sent: {message}",
                extra={"recipients": len(donors), "blood_bank": item["blood_bank"]}
            )
            return

        for donor in donors:
            try:
                self._sms.send(donor["phone"], message)
                outcome.sent += 1
            except SmsDeliveryError as e:
                outcome.failed += 1
                logger.error(
                    f"Failed to send low stock alert: {e.detail}",
                    extra={"phone": donor["phone"], "code": e.code}
                )

        logger.info(
            "Low stock alert sent",
            extra={
                "blood_bank": item["blood_bank"],
                "blood_group": item["blood_group"],
                "area": item["area"],
                "sent": outcome.sent,
                "failed": outcome.failed,
            }
        )

    def check_low_stock(self) -> LowStockSummary:
        """
        Run one sweep over the whole inventory.

        Never raises; a failing item is logged and the sweep moves on.
        """
        summary = LowStockSummary()

        try:
            donor_counts = self._donors.count_by_area_and_group()
            items = self._inventory.get_all()
        except Exception:
            logger.exception("Error checking low stock")
            return summary

        for item in items:
            summary.items_checked += 1
            count = donor_counts.get((item["area"], item["blood_group"]), 0)
            if count >= self.donor_threshold:
                continue

            outcome = self.send_low_stock_alert(item, count)

            if outcome.recipients:
                summary.items_alerted += 1
            summary.messages_sent += outcome.sent
            summary.messages_failed += outcome.failed

        logger.info("Low stock check completed", extra=summary.to_dict())
        return summary
