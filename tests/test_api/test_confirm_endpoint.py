"""Tests for the confirmation endpoint."""

import pytest
from api.confirm import handler
from tests.utils.assertions import assert_valid_response
from tests.utils.factories import create_property_row
from tests.utils.helpers import create_request, response_json


@pytest.fixture
def pending(store):
    row = create_property_row(
        address="Pending confirmation",
        status="needs_confirmation",
        needs_confirmation=True,
        confirmation_token="C0FFEE01",
    )
    store.tables["properties"] = [row]
    return row


@pytest.mark.unit
def test_get_pending_summary(services, pending):
    response = handler(create_request(method="GET", query={"token": "C0FFEE01"}), services)

    assert_valid_response(response, 200)
    body = response_json(response)
    assert body["id"] == pending["id"]
    assert body["needs_confirmation"] is True


@pytest.mark.unit
def test_unknown_token_returns_404(services, pending):
    response = handler(create_request(method="GET", query={"token": "DEADBEEF"}), services)

    assert_valid_response(response, 404)
    assert response_json(response) == {"error": "Link not found or expired"}


@pytest.mark.unit
def test_post_confirms_and_returns_certificate(services, store, pending):
    request = create_request(method="POST", query={"token": "C0FFEE01"}, body={"address": "12 Elm St, Austin, TX"})

    response = handler(request, services)

    assert_valid_response(response, 200)
    body = response_json(response)
    assert body["redirect_url"].endswith(f"/certificates/{body['certificate_id']}")
    assert store.get("properties", "id", pending["id"])["status"] == "done"

    again = handler(request, services)
    assert_valid_response(again, 410)
    assert response_json(again) == {"error": "Already confirmed"}

    summary = handler(create_request(method="GET", query={"token": "C0FFEE01"}), services)
    assert_valid_response(summary, 410)


@pytest.mark.unit
def test_post_without_address_returns_400(services, pending):
    response = handler(create_request(method="POST", query={"token": "C0FFEE01"}, body={"sqft": 900}), services)

    assert_valid_response(response, 400)
    assert response_json(response) == {"error": "Address is required"}
