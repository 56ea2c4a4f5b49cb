"""
Tests for the /map HTML page.
"""
from core.blood_groups import get_marker_color
from schemas import BloodBankResponse, InventoryItemResponse
from services.map_service import MARKER_LOW_COLOR, MARKER_OK_COLOR, MapService
from services import SeedService


def _bank(name, area="Kothrud"):
    return BloodBankResponse(id=1, name=name, address="Addr", phone="+91-20-1", lat=18.5, lng=73.8, area=area)


def _item(bank, group, units, min_level, status):
    return InventoryItemResponse(
        id=1, blood_bank=bank, area="Kothrud", blood_group=group, units=units,
        min_level=min_level, updated_at="2025-01-01T00:00:00Z", stock_status=status
    )


def test_map_page_renders(client, blood_bank_repo, inventory_repo):
    SeedService(blood_bank_repo, inventory_repo).seed()

    response = client.get("/map")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert "blood-bank-map" in html
    assert "inventory-table" in html
    assert "cdn.plot.ly" in html
    assert "Ruby Hall Clinic Blood Bank" in html


def test_map_page_filters_by_area(client, blood_bank_repo, inventory_repo):
    SeedService(blood_bank_repo, inventory_repo).seed()

    html = client.get("/map", params={"area": "Pimpri"}).text
    assert "Aditya Birla Memorial Hospital Blood Bank" in html
    assert "Ruby Hall Clinic Blood Bank" not in html


def test_map_page_without_data(client):
    response = client.get("/map")
    assert response.status_code == 200
    assert "No inventory data" in response.text


def test_marker_colors_follow_stock():
    service = MapService()
    banks = [_bank("Low Bank"), _bank("Fine Bank")]
    items_by_bank = {
        "Low Bank": [_item("Low Bank", "O+", 2, 10, "low")],
        "Fine Bank": [_item("Fine Bank", "O+", 20, 10, "ok")],
    }

    fig = service.build_map_figure(banks, items_by_bank)
    trace = fig.data[0]
    assert list(trace.marker.color) == [MARKER_LOW_COLOR, MARKER_OK_COLOR]
    assert "O+</span>: 2 units (low)" in trace.text[0]
    assert f"color:{get_marker_color('O+')}" in trace.text[0]
    assert fig.layout.map.style == "open-street-map"


def test_hover_text_is_escaped():
    service = MapService()
    fig = service.build_map_figure([_bank("<script>alert(1)</script>")], {})
    assert "<script>" not in fig.data[0].text[0]
    assert "No inventory data" in fig.data[0].text[0]
