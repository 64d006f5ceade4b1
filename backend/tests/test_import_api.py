import os

CSV = (
    "Full Name,Birthday,Student ID,School\n"
    "Ana Diaz,05/01/2010,HS-001,Lincoln\n"
    "Ben Ross,09/12/2011,HS-002,Lincoln\n"
    "Cy Tan,01/01/2012,12,Lincoln\n"
)

THREE_RECORDS = [
    {"name": "Ana Diaz", "dateOfBirth": "2010-05-01", "identificationNumber": "HS-001", "school": "Lincoln"},
    {"name": "Ben Ross", "dateOfBirth": "2011-09-12", "identificationNumber": "HS-002", "school": "Lincoln"},
    {"name": "Cy Tan", "dateOfBirth": "2012-01-01", "identificationNumber": "12", "school": "Lincoln"},
]

PARTICIPANTS_URL = "/api/import/participants"
PROGRAMS_URL = "/api/import/programs"


def _csv_upload(name="roster.csv", body=CSV, mime="text/csv"):
    return {"file": (name, body.encode("utf-8"), mime)}


def test_dry_run_reports_partition(client, extractor, store, auth_headers):
    extractor.records = THREE_RECORDS

    resp = client.post(PARTICIPANTS_URL, files=_csv_upload(), data={"dryRun": "true"}, headers=auth_headers)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Dry run completed"
    assert body["summary"]["validParticipants"] == 2
    assert body["summary"]["invalidParticipants"] == 1
    errors = body["invalidParticipants"][0]["errors"]
    assert any("identification number" in e.lower() for e in errors)
    assert store.documents("participants") == []


def test_reimport_same_file_skips_duplicates(client, extractor, auth_headers):
    extractor.records = THREE_RECORDS[:2]

    first = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers)
    second = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers)

    assert first.status_code == 200, first.text
    assert first.json()["summary"]["savedParticipants"] == 2

    body = second.json()
    assert body["summary"]["savedParticipants"] == 0
    assert body["summary"]["saveErrors"] == 2
    assert all("already exists" in e["error"] for e in body["saveErrors"])
    assert body["saveErrors"][0]["participant"]["identificationNumber"] == "HS-001"


def test_imported_participants_are_readable(client, extractor, auth_headers):
    extractor.records = THREE_RECORDS[:1]

    saved = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers).json()
    participant_id = saved["savedParticipants"][0]["id"]

    resp = client.get(f"/api/participants/{participant_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["participant"]["name"] == "Ana Diaz"


def test_program_import(client, extractor, auth_headers):
    extractor.records = [{"name": "Mentoring", "description": "Weekly one-on-one mentoring"}]

    resp = client.post(PROGRAMS_URL, files=_csv_upload("programs.csv"), headers=auth_headers)

    assert resp.status_code == 200, resp.text
    assert resp.json()["summary"]["savedPrograms"] == 1


def test_temp_upload_removed(client, extractor, import_dir, auth_headers):
    extractor.records = THREE_RECORDS

    client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers)

    assert os.listdir(import_dir) == []


def test_missing_file(client, auth_headers):
    resp = client.post(PARTICIPANTS_URL, data={"dryRun": "true"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No file uploaded"


def test_disallowed_file_type(client, auth_headers):
    resp = client.post(
        PARTICIPANTS_URL,
        files=_csv_upload("report.pdf", "%PDF-1.4", "application/pdf"),
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only CSV and Excel files are allowed"


def test_allowed_mime_with_unsupported_extension(client, extractor, import_dir, auth_headers):
    resp = client.post(
        PARTICIPANTS_URL,
        files=_csv_upload("roster.txt", CSV, "text/plain"),
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unsupported file format"
    assert extractor.calls == []
    assert os.listdir(import_dir) == []


def test_file_too_large(client, monkeypatch, import_dir, auth_headers):
    from heartsmiles.core.config import settings
    monkeypatch.setattr(settings, "IMPORT_MAX_FILE_BYTES", 16)

    resp = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "File size too large. Maximum size is 10MB."
    assert os.listdir(import_dir) == []


def test_corrupt_spreadsheet(client, auth_headers):
    files = {"file": ("roster.xlsx", b"not really a workbook", "application/octet-stream")}
    resp = client.post(PARTICIPANTS_URL, files=files, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Error parsing Excel file")


def test_extraction_failure(client, extractor, store, auth_headers):
    extractor.error = "model unavailable"

    resp = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json()["detail"] == {
        "error": "Failed to process data with AI",
        "details": "model unavailable",
    }
    assert store.add_calls == 0


def test_requires_token(client):
    resp = client.post(PARTICIPANTS_URL, files=_csv_upload())
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Access token required"


def test_umd_staff_cannot_import(client, umd_headers):
    resp = client.post(PARTICIPANTS_URL, files=_csv_upload(), headers=umd_headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "HeartSmiles staff access required"


def test_temp_upload_names_unique_within_same_millisecond(import_dir, monkeypatch):
    from heartsmiles.api.v1 import imports
    monkeypatch.setattr(imports.time, "time", lambda: 1700000000.0)

    first = imports._temp_upload_path("roster.csv")
    second = imports._temp_upload_path("roster.csv")

    assert first != second
    assert os.path.dirname(first) == str(import_dir)
    assert os.path.basename(first).startswith("1700000000000_")
    assert os.path.basename(first).endswith("_roster.csv")


def test_upload_path_strips_directories(import_dir):
    from heartsmiles.api.v1.imports import _temp_upload_path
    path = _temp_upload_path("../../etc/roster.csv")
    assert os.path.dirname(path) == str(import_dir)
    assert path.endswith("_roster.csv")
