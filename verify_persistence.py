import asyncio
import sys

from parcels.app.core.config import settings
from parcels.app.core.observability import configure_logging
from parcels.app.db.session import build_engine
from parcels.app.models.parcel_enums import ParcelStatus
from parcels.app.schemas.parcel import ParcelRecord
from parcels.app.services.parcel_store import ParcelStore

CLIENT_ID = 424242


async def store_parcel():
    engine = build_engine(settings)
    try:
        store = await ParcelStore.open(engine)
        number = await store.add(ParcelRecord(
            client=CLIENT_ID,
            status=ParcelStatus.REGISTERED,
            address="1 Persistence Way",
        ))
        print(f"✅ Parcel stored with number {number}")
        return number
    finally:
        await engine.dispose()


async def check_parcel(number):
    engine = build_engine(settings)
    try:
        store = await ParcelStore.open(engine)
        parcel = await store.get(number)
        print(f"✅ Parcel {parcel.number} read back after reconnect: {parcel.address}")
        owned = await store.get_by_client(CLIENT_ID)
        print(f"Client {CLIENT_ID} now has {len(owned)} parcel(s)")
        await store.delete(number)
        print("✅ Parcel deleted")
    finally:
        await engine.dispose()


def run_verification():
    configure_logging(settings.log_level)
    print(f"Testing persistence against: {settings.database_url}")

    try:
        print("\n--- [Step 1] Storing parcel (first connection) ---")
        number = asyncio.run(store_parcel())

        print("\n--- [Step 2] Reading parcel (new connection) ---")
        asyncio.run(check_parcel(number))
    except Exception as e:
        print(f"❌ Verification Failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run_verification()
