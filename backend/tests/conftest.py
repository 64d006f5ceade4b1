import copy
import uuid
from typing import Any

import pytest
from fastapi.testclient import TestClient

from heartsmiles.api.deps import get_extractor, get_import_pipeline, get_store
from heartsmiles.core import security
from heartsmiles.core.config import settings
from heartsmiles.core.constants import EntityKind, StaffRole
from heartsmiles.db.locks import CollectionLockManager
from heartsmiles.db.models.staff import Staff
from heartsmiles.main import app
from heartsmiles.pipeline.engine import ImportPipeline
from heartsmiles.processing.extractors.base import BaseExtractor, ExtractionResult


# ---- In-memory collaborators ----

class FakeDocumentStore:
    """Dict-backed DocumentStore.  `fail_after` makes add() raise after N inserts."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.fail_after: int | None = None
        self.add_calls = 0

    def insert(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        return doc_id

    def documents(self, collection: str) -> list[dict[str, Any]]:
        return [
            {"id": doc_id, **copy.deepcopy(data)}
            for doc_id, data in self.collections.get(collection, {}).items()
        ]

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        if self.fail_after is not None and self.add_calls >= self.fail_after:
            raise RuntimeError("store unavailable")
        self.add_calls += 1
        return self.insert(collection, data)

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        data = self.collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return {"id": doc_id, **copy.deepcopy(data)}

    async def list(self, collection: str, **where: Any) -> list[dict[str, Any]]:
        return [
            doc for doc in self.documents(collection)
            if all(doc.get(field) == value for field, value in where.items())
        ]


class FakeExtractor(BaseExtractor):
    """Returns fixed records (or a fixed error) and remembers what it was asked."""

    def __init__(self, records: list[dict[str, Any]] | None = None, error: str | None = None) -> None:
        self.records = records or []
        self.error = error
        self.calls: list[tuple[list[dict[str, Any]], EntityKind]] = []

    async def extract(self, rows, kind):
        self.calls.append((rows, kind))
        if self.error is not None:
            return ExtractionResult(success=False, error=self.error)
        return ExtractionResult(success=True, data=copy.deepcopy(self.records))


# ---- Fixtures ----

@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch):
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def import_dir(tmp_path, monkeypatch):
    path = tmp_path / "imports"
    monkeypatch.setattr(settings, "IMPORT_TEMP_DIR", str(path))
    return path


@pytest.fixture
def client(store, extractor, import_dir):
    async def _pipeline():
        return ImportPipeline(store, extractor, locks=CollectionLockManager())

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_extractor] = lambda: extractor
    app.dependency_overrides[get_import_pipeline] = _pipeline
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_staff(store):
    """Insert a staff document and return it (with id)."""
    def _make(
        role: str = StaffRole.HEARTSMILES.value,
        *,
        email: str | None = None,
        password: str = "secret123",
        is_active: bool = True,
    ) -> dict[str, Any]:
        staff = Staff(
            username=f"user-{uuid.uuid4().hex[:6]}",
            name="Test Staff",
            email=email or f"{uuid.uuid4().hex[:8]}@example.org",
            password=security.hash_password(password),
            role=role,
            is_active=is_active,
        )
        document = staff.to_document()
        doc_id = store.insert("staff", document)
        return {"id": doc_id, **document}
    return _make


@pytest.fixture
def token_for():
    def _token(staff: dict[str, Any], **kwargs) -> dict[str, str]:
        token = security.create_access_token(staff["id"], staff["role"], **kwargs)
        return {"Authorization": f"Bearer {token}"}
    return _token


@pytest.fixture
def auth_headers(make_staff, token_for):
    return token_for(make_staff(StaffRole.HEARTSMILES.value))


@pytest.fixture
def umd_headers(make_staff, token_for):
    return token_for(make_staff(StaffRole.UMD.value))
