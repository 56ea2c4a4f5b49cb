"""
Tests for emergency alert broadcasts.
"""
from unittest.mock import MagicMock

import requests
from twilio.base.exceptions import TwilioRestException

from services.alert_service import AlertService, build_alert_message


def _twilio_error(code, msg="Error"):
    return TwilioRestException(400, "https://api.twilio.com/2010-04-01/Accounts/AC/Messages.json", msg=msg, code=code)


def test_alert_sends_to_matching_donors(client, make_donor, auth_headers, twilio_client):
    make_donor(area="Kothrud", blood_group="O-", phone="+919000000001")
    make_donor(area="Kothrud", blood_group="O-", phone="+919000000002")
    make_donor(area="Kothrud", blood_group="A+", phone="+919000000003")
    make_donor(area="Pimpri", blood_group="O-", phone="+919000000004")

    response = client.post(
        "/api/v1/alerts",
        json={"area": "Kothrud", "blood_group": "O-", "additional_info": "Ward 4."},
        headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Alert sent to 2 donor(s)."
    assert data["successful_sends"] == 2
    assert data["failed_sends"] == 0

    recipients = {c.kwargs["to"] for c in twilio_client.messages.create.call_args_list}
    assert recipients == {"+919000000001", "+919000000002"}

    body = twilio_client.messages.create.call_args.kwargs["body"]
    assert body.startswith("URGENT: Blood needed at City Hospital in Kothrud.")
    assert "Blood type: O-. Ward 4. Please help if you can." in body


def test_alert_uses_explicit_hospital_name(client, make_donor, auth_headers, twilio_client):
    make_donor(area="Kothrud", blood_group="B+")

    client.post(
        "/api/v1/alerts",
        json={"hospital_name": "Ruby Hall", "area": "Kothrud", "blood_group": "B+"},
        headers=auth_headers
    )
    body = twilio_client.messages.create.call_args.kwargs["body"]
    assert "Blood needed at Ruby Hall in Kothrud" in body


def test_alert_all_areas_any_group(client, make_donor, auth_headers):
    make_donor(area="Kothrud", blood_group="O-")
    make_donor(area="Pimpri", blood_group="AB+")
    make_donor(area="Shivajinagar", blood_group="B-")

    response = client.post(
        "/api/v1/alerts",
        json={"area": "All", "blood_group": "Any"},
        headers=auth_headers
    )
    assert response.json()["successful_sends"] == 3


def test_alert_no_donors_in_area(client, auth_headers):
    response = client.post(
        "/api/v1/alerts",
        json={"area": "Kothrud", "blood_group": "O-"},
        headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "No donors found with the required blood group in the Kothrud area."


def test_alert_no_donors_any_area(client, auth_headers):
    response = client.post(
        "/api/v1/alerts",
        json={"area": "All", "blood_group": "O-"},
        headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "No donors found with the required blood group in any area."


def test_alert_invalid_blood_group(client, auth_headers):
    response = client.post(
        "/api/v1/alerts",
        json={"area": "All", "blood_group": "Z+"},
        headers=auth_headers
    )
    assert response.status_code == 400


def test_alert_counts_failures(client, make_donor, auth_headers, twilio_client, donor_repo):
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000001")
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000002")

    twilio_client.messages.create.side_effect = [
        _twilio_error(30003, "Unreachable destination handset"),
        twilio_client.messages.create.return_value,
    ]

    response = client.post(
        "/api/v1/alerts",
        json={"area": "Kothrud", "blood_group": "O+"},
        headers=auth_headers
    )
    data = response.json()
    assert data["message"] == "Alert sent to 1 donor(s). 1 failed."
    assert data["successful_sends"] == 1
    assert data["failed_sends"] == 1
    assert data["removed_donors"] == 0
    assert len(donor_repo.find()) == 2


def test_alert_removes_invalid_numbers(client, make_donor, auth_headers, twilio_client, donor_repo):
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000001")
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000002")

    def create(body, from_, to):
        if to == "+919000000001":
            raise _twilio_error(21211, "Invalid 'To' Phone Number")
        return twilio_client.messages.create.return_value

    twilio_client.messages.create.side_effect = create

    data = client.post(
        "/api/v1/alerts",
        json={"area": "Kothrud", "blood_group": "O+"},
        headers=auth_headers
    ).json()

    assert data["failed_sends"] == 1
    assert data["removed_donors"] == 1
    assert donor_repo.get_by_phone("+919000000001") is None
    assert donor_repo.get_by_phone("+919000000002") is not None


def test_alert_without_twilio(donor_repo, unconfigured_sms_service, make_donor):
    make_donor(area="Kothrud", blood_group="O+")
    make_donor(area="Kothrud", blood_group="O+")

    service = AlertService(donor_repository=donor_repo, sms_service=unconfigured_sms_service)
    result = service.broadcast("City Hospital", "Kothrud", "O+")

    assert result.message == "Alert would be sent to 2 donor(s). Twilio not configured."
    assert result.successful_sends == 2
    assert result.failed_sends == 0


def test_build_alert_message_without_info():
    message = build_alert_message("City Hospital", "Kothrud", "O+")
    assert message.startswith("URGENT: Blood needed at City Hospital in Kothrud. Blood type: O+.")
    assert message.endswith("Please help if you can.")


def test_alert_continues_after_network_error(client, make_donor, auth_headers, twilio_client, donor_repo):
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000001")
    make_donor(area="Kothrud", blood_group="O+", phone="+919000000002")
    twilio_client.messages.create.side_effect = [
        requests.exceptions.ConnectionError("connection reset"),
        MagicMock(sid="SM2"),
    ]

    response = client.post(
        "/api/v1/alerts",
        json={"area": "Kothrud", "blood_group": "O+"},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Alert sent to 1 donor(s). 1 failed."
    assert data["successful_sends"] == 1
    assert data["failed_sends"] == 1
    assert data["removed_donors"] == 0
    assert twilio_client.messages.create.call_count == 2
    assert len(donor_repo.find()) == 2
