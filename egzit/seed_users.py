"""
Database seeding script for the backoffice.

Creates the ADMIN account (admins cannot register through the API) and a
few movers so moves can be scheduled right away.
Run this script after the database is set up but before first use.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from egzit.app.db.session import AsyncSessionLocal, engine, Base
from egzit.app.models.user import User
from egzit.app.models.mover import Mover
from egzit.app.models.enums import UserRole
from egzit.app.models.move_enums import VehicleClass
from egzit.app.core.security import get_password_hash
import egzit.app.main  # noqa: F401  (registers every model with Base)

SEED_MOVERS = [
    {"name": "Island Movers Ltd", "phone": "876-555-0101", "location": "Kingston",
     "vehicle_class": VehicleClass.TRUCK, "rating": 4.7},
    {"name": "Blue Mountain Haulage", "phone": "876-555-0142", "location": "Mandeville",
     "vehicle_class": VehicleClass.TRUCK, "rating": 4.4},
    {"name": "MoBay Quick Move", "phone": "876-555-0177", "location": "Montego Bay",
     "vehicle_class": VehicleClass.CAR, "rating": 4.1},
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("Starting seeding...")

        result = await db.execute(select(User).where(User.username == "admin"))
        if result.scalar_one_or_none():
            print("ADMIN user already exists, skipping")
        else:
            db.add(User(
                email="admin@egzit.com",
                username="admin",
                full_name="EGZIT Backoffice",
                hashed_password=get_password_hash("admin123"),
                role=UserRole.ADMIN,
                is_active=True,
            ))
            print("Created ADMIN user (username: admin, password: admin123)")

        existing = set((await db.execute(select(Mover.name))).scalars().all())
        for mover in SEED_MOVERS:
            if mover["name"] not in existing:
                db.add(Mover(**mover))
                print(f"Created mover {mover['name']}")

        await db.commit()
        print("Seeding completed.")
        print("Note: CUSTOMER users register via POST /v1/auth/register")


if __name__ == "__main__":
    asyncio.run(seed())
