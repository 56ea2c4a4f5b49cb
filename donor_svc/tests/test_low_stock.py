"""
Tests for the low-stock sweep.
"""
from unittest.mock import MagicMock, patch

import requests
from twilio.base.exceptions import TwilioRestException

from services.low_stock_service import LowStockService, build_low_stock_message

BANK = "Sahyadri Hospital Blood Bank"


def test_sweep_with_no_inventory(low_stock_service, twilio_client):
    summary = low_stock_service.check_low_stock()
    assert summary.items_checked == 0
    assert summary.items_alerted == 0
    twilio_client.messages.create.assert_not_called()


def test_sweep_alerts_only_pairs_below_threshold(low_stock_service, inventory_repo, make_donor, twilio_client):
    inventory_repo.upsert(BANK, "Kothrud", "O+", units=30, min_level=10)
    inventory_repo.upsert(BANK, "Kothrud", "A+", units=30, min_level=10)

    # 10 O+ donors meets the threshold, 3 A+ donors does not
    for _ in range(10):
        make_donor(area="Kothrud", blood_group="O+")
    for _ in range(3):
        make_donor(area="Kothrud", blood_group="A+")

    summary = low_stock_service.check_low_stock()

    assert summary.items_checked == 2
    assert summary.items_alerted == 1
    assert summary.messages_sent == 3
    assert twilio_client.messages.create.call_count == 3
    body = twilio_client.messages.create.call_args.kwargs["body"]
    assert "Low blood stock alert for A+" in body
    assert "Only 3 donors available" in body


def test_sweep_skips_pairs_without_donors(low_stock_service, inventory_repo, make_donor, twilio_client):
    inventory_repo.upsert(BANK, "Kothrud", "B-", units=1, min_level=10)
    make_donor(area="Pimpri", blood_group="B-")

    summary = low_stock_service.check_low_stock()

    assert summary.items_checked == 1
    assert summary.items_alerted == 0
    twilio_client.messages.create.assert_not_called()


def test_sweep_counts_failures_and_keeps_donors(
    low_stock_service, inventory_repo, make_donor, twilio_client, donor_repo
):
    inventory_repo.upsert(BANK, "Kothrud", "O-", units=2, min_level=10)
    make_donor(area="Kothrud", blood_group="O-", phone="+919000000001")
    twilio_client.messages.create.side_effect = TwilioRestException(
        400, "https://api.twilio.com", msg="Invalid 'To' Phone Number", code=21211
    )

    summary = low_stock_service.check_low_stock()

    assert summary.messages_sent == 0
    assert summary.messages_failed == 1
    # Only alert broadcasts prune invalid numbers
    assert donor_repo.get_by_phone("+919000000001") is not None


def test_sweep_respects_custom_threshold(donor_repo, inventory_repo, sms_service, make_donor, twilio_client):
    inventory_repo.upsert(BANK, "Kothrud", "O+", units=30, min_level=10)
    make_donor(area="Kothrud", blood_group="O+")
    make_donor(area="Kothrud", blood_group="O+")

    service = LowStockService(donor_repo, inventory_repo, sms_service, donor_threshold=2)
    assert service.check_low_stock().items_alerted == 0

    service = LowStockService(donor_repo, inventory_repo, sms_service, donor_threshold=3)
    assert service.check_low_stock().items_alerted == 1


def test_sweep_never_raises(low_stock_service):
    with patch.object(low_stock_service._donors, "count_by_area_and_group", side_effect=RuntimeError("boom")):
        summary = low_stock_service.check_low_stock()
    assert summary.items_checked == 0


def test_sweep_continues_after_item_error(low_stock_service, inventory_repo, make_donor, twilio_client):
    inventory_repo.upsert(BANK, "Kothrud", "O+", units=1, min_level=10)
    inventory_repo.upsert(BANK, "Kothrud", "A+", units=1, min_level=10)
    make_donor(area="Kothrud", blood_group="O+")
    make_donor(area="Kothrud", blood_group="A+")

    original = low_stock_service._donors.find
    calls = []

    def flaky(area=None, blood_group=None):
        calls.append(blood_group)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return original(area=area, blood_group=blood_group)

    with patch.object(low_stock_service._donors, "find", side_effect=flaky):
        summary = low_stock_service.check_low_stock()

    assert summary.items_checked == 2
    assert summary.items_alerted == 1
    assert len(calls) == 2


def test_single_alert_without_twilio(donor_repo, inventory_repo, unconfigured_sms_service, make_donor):
    make_donor(area="Kothrud", blood_group="O+")
    item, _ = inventory_repo.upsert(BANK, "Kothrud", "O+", units=1, min_level=10)

    service = LowStockService(donor_repo, inventory_repo, unconfigured_sms_service)
    outcome = service.send_low_stock_alert(item)

    assert outcome.recipients == 1
    assert outcome.sent == 0
    assert outcome.failed == 0


def test_build_low_stock_message():
    item = {"blood_group": "B+", "blood_bank": "Ruby Hall Clinic Blood Bank", "area": "Shivajinagar", "units": 8}
    assert build_low_stock_message(item, 4) == (
        "URGENT: Low blood stock alert for B+ at Ruby Hall Clinic Blood Bank in Shivajinagar. "
        "Current stock: 8 units. Only 4 donors available in your area. Please consider donating."
    )


def test_single_alert_counts_network_errors(low_stock_service, inventory_repo, make_donor, twilio_client):
    make_donor(area="Kothrud", blood_group="O+")
    make_donor(area="Kothrud", blood_group="O+")
    item, _ = inventory_repo.upsert(BANK, "Kothrud", "O+", units=1, min_level=10)
    twilio_client.messages.create.side_effect = [requests.exceptions.ConnectionError("reset"), MagicMock(sid="SM1")]

    outcome = low_stock_service.send_low_stock_alert(item)

    assert outcome.sent == 1
    assert outcome.failed == 1
    assert twilio_client.messages.create.call_count == 2


def test_single_alert_never_raises(low_stock_service, inventory_repo):
    item, _ = inventory_repo.upsert(BANK, "Kothrud", "O+", units=1, min_level=10)

    with patch.object(low_stock_service._donors, "find", side_effect=RuntimeError("database is locked")):
        outcome = low_stock_service.send_low_stock_alert(item)

    assert outcome.recipients == 0
    assert outcome.sent == 0
