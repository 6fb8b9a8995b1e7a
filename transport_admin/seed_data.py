"""
Database seeding script for reference data.

Creates one company, vehicle owner, driver and manager for development,
and prints a bearer token for each role.
Run with: python -m transport_admin.seed_data
"""

import asyncio

from sqlalchemy import select

from transport_admin.app.core.config import settings
from transport_admin.app.core.jwt import build_claims, create_access_token
from transport_admin.app.db.session import Database
from transport_admin.app.models.company import Company
from transport_admin.app.models.vehicle_owner import VehicleOwner
from transport_admin.app.models.driver import Driver
from transport_admin.app.models.manager import Manager
from transport_admin.app.models.enums import UserRole


async def seed_reference_data():
    """
    Seed reference parties.

    Creates:
    - 1 company
    - 1 vehicle owner with 1 driver
    - 1 manager
    """
    database = Database.from_settings(settings)
    await database.create_all()

    async with database.session_factory() as db:
        print("🌱 Starting reference data seeding...")

        existing = await db.execute(select(Company).where(Company.email == "ops@acme-chemicals.example"))
        if existing.scalar_one_or_none():
            print("ℹ️  Reference data already exists, skipping seeding")
            await database.dispose()
            return

        company = Company(name="Acme Chemicals", email="ops@acme-chemicals.example", phone="9800000001")
        vehicle_owner = VehicleOwner(name="Konkan Tankers", email="fleet@konkan-tankers.example", phone="9800000002")
        manager = Manager(name="Asha Patil", email="asha@transport-admin.example", phone="9800000003")
        db.add_all([company, vehicle_owner, manager])
        await db.flush()

        driver = Driver(
            name="Ravi Kumar",
            email="ravi@konkan-tankers.example",
            phone="9800000004",
            license_number="MH1220110012345",
            vehicle_owner_id=vehicle_owner.id,
        )
        db.add(driver)
        await db.commit()

        print("✅ Created company, vehicle owner, driver and manager")

        tokens = {
            UserRole.ADMIN: build_claims(UserRole.ADMIN, 1, sub="admin"),
            UserRole.COMPANY: build_claims(UserRole.COMPANY, 100, company.id, sub=company.email),
            UserRole.VEHICLE_OWNER: build_claims(UserRole.VEHICLE_OWNER, 200, vehicle_owner.id, sub=vehicle_owner.email),
            UserRole.DRIVER: build_claims(UserRole.DRIVER, 300, driver.id, sub=driver.email),
            UserRole.MANAGER: build_claims(UserRole.MANAGER, 400, manager.id, sub=manager.email),
        }
        print("\nDevelopment tokens:")
        for role, claims in tokens.items():
            token = create_access_token(claims)
            print(f"  - {role.value:<14} {token}")

    await database.dispose()
    print("\n🎉 Seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_reference_data())
