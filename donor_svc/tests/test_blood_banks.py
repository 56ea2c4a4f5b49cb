"""
Tests for blood bank endpoints and sample data seeding.
"""
from services import SeedService
from services.seed_service import load_sample_data

NEW_BANK = {
    "name": "Poona Hospital Blood Bank",
    "address": "27, Sadashiv Peth, Pune, Maharashtra 411030",
    "phone": "+91-20-24331706",
    "lat": 18.5108,
    "lng": 73.8480,
    "area": "Sadashiv Peth",
}


def test_list_blood_banks_empty(client):
    response = client.get("/api/v1/blood-banks")
    assert response.status_code == 200
    assert response.json() == []


def test_create_blood_bank(client, auth_headers):
    response = client.post("/api/v1/blood-banks", json=NEW_BANK, headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == NEW_BANK["name"]
    assert data["lat"] == NEW_BANK["lat"]
    assert isinstance(data["id"], int)


def test_create_blood_bank_duplicate(client, auth_headers):
    client.post("/api/v1/blood-banks", json=NEW_BANK, headers=auth_headers)
    response = client.post("/api/v1/blood-banks", json=NEW_BANK, headers=auth_headers)
    assert response.status_code == 409


def test_create_blood_bank_invalid_coordinates(client, auth_headers):
    response = client.post("/api/v1/blood-banks", json={**NEW_BANK, "lat": 123.0}, headers=auth_headers)
    assert response.status_code == 422


def test_create_blood_bank_requires_auth(client):
    response = client.post("/api/v1/blood-banks", json=NEW_BANK)
    assert response.status_code == 401


def test_list_blood_banks_filters(client, blood_bank_repo, inventory_repo):
    SeedService(blood_bank_repo, inventory_repo).seed()

    kothrud = client.get("/api/v1/blood-banks", params={"area": "Kothrud"}).json()
    assert kothrud and all(b["area"] == "Kothrud" for b in kothrud)

    everything = client.get("/api/v1/blood-banks", params={"area": "All"}).json()
    assert len(everything) == 8
    assert [b["name"] for b in everything] == sorted(b["name"] for b in everything)

    search = client.get("/api/v1/blood-banks", params={"search": "sassoon"}).json()
    assert {b["name"] for b in search} >= {"Sassoon General Hospital Blood Bank"}
    assert all(
        "sassoon" in (b["name"] + b["address"] + b["area"]).lower()
        for b in search
    )


def test_seed_inserts_sample_data_once(blood_bank_repo, inventory_repo):
    seeder = SeedService(blood_bank_repo, inventory_repo)

    first = seeder.seed()
    assert first == {"blood_banks": 8, "inventory": 5}

    second = seeder.seed()
    assert second == {"blood_banks": 0, "inventory": 0}
    assert blood_bank_repo.count() == 8
    assert inventory_repo.count() == 5


def test_seed_takes_inventory_area_from_bank(blood_bank_repo, inventory_repo):
    SeedService(blood_bank_repo, inventory_repo).seed()

    items = inventory_repo.find_by_blood_bank("Aditya Birla Memorial Hospital Blood Bank")
    assert [i["area"] for i in items] == ["Pimpri"]


def test_sample_data_file_is_consistent():
    data = load_sample_data()
    bank_names = {bank["name"] for bank in data["blood_banks"]}
    assert all(item["blood_bank"] in bank_names for item in data["inventory"])
