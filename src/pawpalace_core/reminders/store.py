"""
Document store access for the reminder pass.

``ReminderStore`` is the read interface the reminder service depends on.
``SQLAlchemyPetStore`` implements it over async SQLAlchemy sessions and also
carries the write operations that keep the adoption and purchase invariants
(one accepted adopter per pet, purchases mark the pet sold).
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.session import SessionManager
from ..exceptions import (
    BusinessRuleException,
    ConnectionException,
    DatabaseException,
    TransactionException,
    handle_database_retry,
)
from ..models import AdoptionRequest, AdoptionStatus, Pet, Purchase
from ..utils.datetime_utils import get_current_utc

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ReminderStore(Protocol):
    """Read operations the reminder pass needs from the document store."""

    async def find_pets_with_vaccinations(self) -> Sequence[Any]: ...

    async def find_accepted_adoption(self, pet_id: uuid.UUID) -> Optional[Any]: ...

    async def find_purchase(self, pet_id: uuid.UUID) -> Optional[Any]: ...


class SQLAlchemyPetStore:
    """Pet, adoption and purchase persistence over a SessionManager."""

    def __init__(
        self,
        session_manager: SessionManager,
        max_retries: int = 2,
        retry_delay: float = 0.5,
    ) -> None:
        """
        Initialize the store.

        Args:
            session_manager: Source of sessions and transactions
            max_retries: Retries for transient (connection-level) failures
            retry_delay: Base delay for exponential backoff between retries
        """
        self.session_manager = session_manager
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    async def _run(
        self,
        operation_name: str,
        operation: Callable[[AsyncSession], Awaitable[R]],
        write: bool = False,
    ) -> R:
        async def attempt() -> R:
            context = (
                self.session_manager.get_transaction()
                if write
                else self.session_manager.get_session()
            )
            try:
                async with context as session:
                    return await operation(session)
            except (DisconnectionError, OperationalError) as e:
                raise ConnectionException(
                    f"Store unavailable during {operation_name}",
                    database_url=str(self.session_manager.engine.url),
                    original_error=e,
                )
            except SQLAlchemyError as e:
                if write:
                    raise TransactionException(
                        f"Store write {operation_name} failed",
                        operation=operation_name,
                        original_error=e,
                    )
                raise DatabaseException(
                    f"Store operation {operation_name} failed",
                    details={"operation": operation_name},
                    original_error=e,
                    max_retries=0,
                )

        retrying = handle_database_retry(
            operation_name,
            max_retries=self.max_retries,
            base_delay=self.retry_delay,
            logger=logger,
        )(attempt)
        return await retrying()

    # Reads used by the reminder pass

    async def find_pets_with_vaccinations(self) -> List[Pet]:
        """All non-deleted pets with at least one stored vaccination entry."""

        async def query(session: AsyncSession) -> List[Pet]:
            result = await session.execute(
                select(Pet).where(Pet.create_query_filter_active())
            )
            return [pet for pet in result.scalars().all() if pet.vaccinations]

        return await self._run("find_pets_with_vaccinations", query)

    async def find_accepted_adoption(
        self, pet_id: uuid.UUID
    ) -> Optional[AdoptionRequest]:
        """The accepted adoption request for ``pet_id``, if any."""

        async def query(session: AsyncSession) -> Optional[AdoptionRequest]:
            result = await session.execute(
                select(AdoptionRequest)
                .where(
                    AdoptionRequest.pet_id == pet_id,
                    AdoptionRequest.status == AdoptionStatus.ACCEPTED,
                    AdoptionRequest.create_query_filter_active(),
                )
                .order_by(AdoptionRequest.accepted_at.desc())
                .limit(1)
            )
            return result.scalars().first()

        return await self._run("find_accepted_adoption", query)

    async def find_purchase(self, pet_id: uuid.UUID) -> Optional[Purchase]:
        """The most recent purchase of ``pet_id``, if any."""

        async def query(session: AsyncSession) -> Optional[Purchase]:
            result = await session.execute(
                select(Purchase)
                .where(
                    Purchase.pet_id == pet_id,
                    Purchase.create_query_filter_active(),
                )
                .order_by(Purchase.created_at.desc())
                .limit(1)
            )
            return result.scalars().first()

        return await self._run("find_purchase", query)

    # Writes

    async def add_pet(self, pet: Pet) -> Pet:
        """Persist a new pet listing."""

        async def insert(session: AsyncSession) -> Pet:
            session.add(pet)
            await session.flush()
            return pet

        created = await self._run("add_pet", insert, write=True)
        logger.info(f"Pet listing {created.id} ({created.name}) added")
        return created

    async def get_pet(self, pet_id: uuid.UUID) -> Optional[Pet]:
        async def query(session: AsyncSession) -> Optional[Pet]:
            return await session.get(Pet, pet_id)

        return await self._run("get_pet", query)

    async def update_vaccinations(
        self, pet_id: uuid.UUID, raw_entries: Optional[List[Any]]
    ) -> Pet:
        """
        Replace a pet's vaccination history with a normalized copy.

        Raises:
            BusinessRuleException: If the pet does not exist
        """

        async def update(session: AsyncSession) -> Pet:
            pet = await session.get(Pet, pet_id)
            if pet is None or pet.is_deleted:
                raise BusinessRuleException(
                    "Pet not found",
                    rule_name="pet_exists",
                    context={"pet_id": str(pet_id)},
                )
            pet.set_vaccinations(raw_entries)
            return pet

        return await self._run("update_vaccinations", update, write=True)

    async def add_adoption_request(self, request: AdoptionRequest) -> AdoptionRequest:
        async def insert(session: AsyncSession) -> AdoptionRequest:
            session.add(request)
            await session.flush()
            return request

        return await self._run("add_adoption_request", insert, write=True)

    async def accept_adoption(self, request_id: uuid.UUID) -> AdoptionRequest:
        """
        Accept an adoption request.

        The request becomes ``accepted``, the pet is marked adopted, and every
        other request for the same pet is closed, in one transaction.

        Raises:
            BusinessRuleException: If the request or its pet does not exist,
                or the request was closed
        """

        async def accept(session: AsyncSession) -> AdoptionRequest:
            request = await session.get(AdoptionRequest, request_id)
            if request is None or request.is_deleted:
                raise BusinessRuleException(
                    "Adoption request not found",
                    rule_name="adoption_request_exists",
                    context={"adoption_request_id": str(request_id)},
                )

            pet = await session.get(Pet, request.pet_id)
            if pet is None:
                raise BusinessRuleException(
                    "Invalid pet in adoption request",
                    rule_name="pet_exists",
                    context={"pet_id": str(request.pet_id)},
                )

            request.accept(get_current_utc())
            pet.mark_adopted()

            result = await session.execute(
                select(AdoptionRequest).where(
                    AdoptionRequest.pet_id == request.pet_id,
                    AdoptionRequest.id != request.id,
                )
            )
            closed = AdoptionRequest.close_others(
                list(result.scalars().all()), request.id
            )
            logger.info(
                f"Adoption request {request.id} accepted for pet {pet.id}; "
                f"{closed} other request(s) closed"
            )
            return request

        return await self._run("accept_adoption", accept, write=True)

    async def record_purchase(self, purchase: Purchase) -> Purchase:
        """
        Persist a purchase and mark the pet sold.

        Raises:
            BusinessRuleException: If the pet does not exist
        """

        async def insert(session: AsyncSession) -> Purchase:
            pet = await session.get(Pet, purchase.pet_id)
            if pet is None:
                raise BusinessRuleException(
                    "Pet not found",
                    rule_name="pet_exists",
                    context={"pet_id": str(purchase.pet_id)},
                )
            session.add(purchase)
            pet.mark_sold()
            await session.flush()
            return purchase

        return await self._run("record_purchase", insert, write=True)
