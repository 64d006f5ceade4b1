from heartsmiles.db.models.participant import Participant
from heartsmiles.db.models.program import Program


def _seed_participants(store, count, **overrides):
    ids = []
    for n in range(count):
        record = {
            "name": f"Participant {n:02d}",
            "dateOfBirth": "2010-01-01",
            "identificationNumber": f"HS-{n:03d}",
            "school": "Lincoln",
        }
        record.update(overrides)
        ids.append(store.insert("participants", Participant.from_record(record).to_document()))
    return ids


def test_list_participants_paginates(client, store, auth_headers):
    _seed_participants(store, 5)

    resp = client.get("/api/participants", params={"page": 2, "limit": 2}, headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["participants"]) == 2
    assert body["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalItems": 5,
        "itemsPerPage": 2,
    }


def test_list_participants_default_limit(client, store, auth_headers):
    _seed_participants(store, 3)
    body = client.get("/api/participants", headers=auth_headers).json()
    assert body["pagination"]["itemsPerPage"] == 50
    assert body["pagination"]["totalPages"] == 1


def test_filter_by_school_and_active(client, store, auth_headers):
    _seed_participants(store, 2)
    _seed_participants(store, 1, school="Roosevelt", identificationNumber="RV-001")
    _seed_participants(store, 1, school="Roosevelt", identificationNumber="RV-002", isActive=False)

    body = client.get(
        "/api/participants",
        params={"school": "Roosevelt", "isActive": "true"},
        headers=auth_headers,
    ).json()

    assert [p["identificationNumber"] for p in body["participants"]] == ["RV-001"]


def test_search_participants(client, store, auth_headers):
    _seed_participants(store, 2)
    _seed_participants(store, 1, name="Zoe Quinn", identificationNumber="ZQ-777")

    body = client.get("/api/participants", params={"search": "zq-7"}, headers=auth_headers).json()

    assert [p["name"] for p in body["participants"]] == ["Zoe Quinn"]


def test_get_participant_not_found(client, auth_headers):
    resp = client.get("/api/participants/missing-id", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Participant not found"


def test_program_by_name(client, store, umd_headers):
    store.insert("programs", Program.from_record(
        {"name": "Mentoring", "description": "Weekly one-on-one mentoring"},
    ).to_document())

    found = client.get("/api/programs/by-name/Mentoring", headers=umd_headers)
    missing = client.get("/api/programs/by-name/Robotics", headers=umd_headers)

    assert found.status_code == 200
    assert found.json()["program"]["description"] == "Weekly one-on-one mentoring"
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Program not found"


def test_search_programs(client, store, auth_headers):
    for name, description in [("Mentoring", "Weekly mentoring"), ("Robotics", "Build and code robots")]:
        store.insert("programs", Program.from_record({"name": name, "description": description}).to_document())

    body = client.get("/api/programs", params={"search": "ROBOT"}, headers=auth_headers).json()

    assert [p["name"] for p in body["programs"]] == ["Robotics"]
    assert body["pagination"]["totalItems"] == 1
