"""
Parcel store service.

Sole mediator between ParcelRecord values and rows of the `parcel` table.
Enforces the two status guards: address changes and deletion are only
allowed while a parcel is registered.
"""

from contextlib import asynccontextmanager
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from parcels.app.core.exceptions import (
    AddressChangeNotPermittedError,
    DeleteNotPermittedError,
    ParcelNotFoundError,
    SchemaInitError,
    StorageError,
)
from parcels.app.core.observability import logger, observe
from parcels.app.db.session import Base
from parcels.app.models.parcel import Parcel
from parcels.app.models.parcel_enums import ParcelStatus
from parcels.app.schemas.parcel import ParcelRecord

# Connection failures such as ConnectionRefusedError reach us unwrapped
DRIVER_ERRORS = (SQLAlchemyError, OSError)


class ParcelStore:
    """
    Persistence layer for parcels.

    The engine is owned by the caller; the store never disposes it.
    Use `await ParcelStore.open(engine)` to get a store with its schema ensured.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    async def open(cls, engine: AsyncEngine) -> "ParcelStore":
        """Create a store and make sure the parcel table exists."""
        store = cls(engine)
        await store.ensure_schema()
        return store

    async def ensure_schema(self) -> None:
        """
        Create the parcel table if it is absent.

        Raises:
            SchemaInitError: If the table cannot be created. Unrecoverable.
        """
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all, tables=[Parcel.__table__])
        except DRIVER_ERRORS as exc:
            error = SchemaInitError(exc)
            logger.critical(error.message)
            raise error from exc

    @asynccontextmanager
    async def _operation(self, name: str, **fields):
        async with observe(name, **fields) as log_data:
            try:
                yield log_data
            except DRIVER_ERRORS as exc:
                raise StorageError(name, exc) from exc

    async def add(self, parcel: ParcelRecord) -> int:
        """
        Insert a new parcel.

        The number on the given record is ignored; the database assigns one.

        Returns:
            Store-assigned parcel number
        """
        async with self._operation("add", client=parcel.client) as log_data:
            row = Parcel(
                client=parcel.client,
                status=parcel.status,
                address=parcel.address,
                created_at=parcel.created_at,
            )
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
            log_data["number"] = row.number
            return row.number

    async def get(self, number: int) -> ParcelRecord:
        """
        Fetch one parcel by number.

        Raises:
            ParcelNotFoundError: If no parcel has this number
            StorageError: On database failure
        """
        async with self._operation("get", number=number):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Parcel).where(Parcel.number == number)
                )
                row = result.scalar_one_or_none()

            if row is None:
                raise ParcelNotFoundError(number)

            return ParcelRecord.model_validate(row)

    async def get_by_client(self, client: int) -> List[ParcelRecord]:
        """
        Fetch all parcels of a client in insertion order (ascending number).

        Returns an empty list when the client has no parcels.
        """
        async with self._operation("get_by_client", client=client) as log_data:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Parcel)
                    .where(Parcel.client == client)
                    .order_by(Parcel.number)
                )
                rows = result.scalars().all()

            log_data["rows"] = len(rows)
            return [ParcelRecord.model_validate(row) for row in rows]

    async def set_status(self, number: int, status: str) -> None:
        """
        Overwrite the status of a parcel.

        No validation of the value, and no error for an unknown number:
        the update simply affects zero rows.
        """
        if isinstance(status, ParcelStatus):
            status = status.value

        async with self._operation("set_status", number=number, status=status) as log_data:
            async with self._session_factory() as session:
                result = await session.execute(
                    update(Parcel)
                    .where(Parcel.number == number)
                    .values(status=status)
                    .execution_options(synchronize_session=False)
                )
                await session.commit()
            log_data["rows"] = result.rowcount

    async def set_address(self, number: int, address: str) -> None:
        """
        Change the delivery address of a registered parcel.

        Raises:
            ParcelNotFoundError: If no parcel has this number
            AddressChangeNotPermittedError: If the parcel is not registered
            StorageError: On database failure
        """
        async with self._operation("set_address", number=number):
            statement = update(Parcel).values(address=address)
            await self._guarded(statement, number, AddressChangeNotPermittedError)

    async def delete(self, number: int) -> None:
        """
        Delete a registered parcel.

        Raises:
            ParcelNotFoundError: If no parcel has this number
            DeleteNotPermittedError: If the parcel is not registered
            StorageError: On database failure
        """
        async with self._operation("delete", number=number):
            await self._guarded(delete(Parcel), number, DeleteNotPermittedError)

    async def _guarded(self, statement, number: int, guard_error) -> None:
        """
        Apply `statement` only if the parcel is still registered.

        Check and write happen in one transaction: the conditional statement
        is the check, and the status is read back only to pick the error.
        """
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    statement
                    .where(
                        Parcel.number == number,
                        Parcel.status == ParcelStatus.REGISTERED.value,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    return

                current = await session.execute(
                    select(Parcel.number, Parcel.status).where(Parcel.number == number)
                )
                row = current.first()

        if row is None:
            raise ParcelNotFoundError(number)
        raise guard_error(number, row.status)
