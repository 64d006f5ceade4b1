"""
Seed initial staff accounts for development.
Run: python -m scripts.seed_staff  (from backend/)
"""

import asyncio

from heartsmiles.core.config import settings
from heartsmiles.db.store import FirestoreDocumentStore
from heartsmiles.repositories.staff import create_staff, get_staff_by_email


SEED_STAFF = [
    {
        "username": "admin",
        "name": "HeartSmiles Admin",
        "email": "admin@heartsmiles.org",
        "password": "admin123",  # Change in production!
        "role": "heartSmiles",
    },
    {
        "username": "umd-viewer",
        "name": "UMD Viewer",
        "email": "viewer@umd.edu",
        "password": "viewer123",
        "role": "umd",
    },
]


async def seed():
    """Insert seed staff, skipping emails that already exist."""
    store = FirestoreDocumentStore.from_settings(settings)
    created = 0
    try:
        for data in SEED_STAFF:
            if await get_staff_by_email(store, data["email"]):
                print(f"  Skipped existing staff: {data['email']}")
                continue
            staff = await create_staff(store, **data)
            print(f"  Created staff: {staff['email']} ({staff['role']})")
            created += 1
    finally:
        store.close()
    print(f"Seeded {created} staff accounts.")


if __name__ == "__main__":
    asyncio.run(seed())
