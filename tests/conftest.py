"""
Pytest configuration and fixtures for pawpalace-core tests.

This module provides common fixtures for all tests in the package: an
in-memory SQLite store, factories for pets, adoption requests and purchases,
and in-process fakes for the mail transport and the document store.
"""

import logging
import threading
import uuid
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from pawpalace_core.database.connection import create_engine
from pawpalace_core.database.session import SessionManager
from pawpalace_core.exceptions import MailDeliveryException
from pawpalace_core.models import (
    AdoptionRequest,
    AdoptionStatus,
    Pet,
    PetPurpose,
    PetSpecies,
    Purchase,
)
from pawpalace_core.models.base import Base
from pawpalace_core.reminders.store import SQLAlchemyPetStore

# Shared in-memory database; StaticPool keeps it on one connection
SQLITE_TEST_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory SQLite engine with all tables."""
    engine = create_engine(SQLITE_TEST_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_manager(test_engine: AsyncEngine) -> SessionManager:
    """Create a session manager for testing."""
    return SessionManager(test_engine)


@pytest_asyncio.fixture
async def pet_store(test_session_manager: SessionManager) -> SQLAlchemyPetStore:
    """SQLAlchemy-backed store without retry delays."""
    return SQLAlchemyPetStore(test_session_manager, max_retries=0, retry_delay=0)


# Factory classes for creating test entities
class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    def build(**kwargs) -> Pet:
        """Build a Pet instance without saving to database."""
        defaults: Dict[str, Any] = {
            "id": uuid.uuid4(),
            "owner_email": f"owner_{uuid.uuid4().hex[:8]}@example.com",
            "name": "Bella",
            "species": PetSpecies.DOG,
            "vaccinations": [],
        }
        defaults.update(kwargs)
        return Pet(**defaults)

    @staticmethod
    def build_for_sale(price: Decimal = Decimal("250.00"), **kwargs) -> Pet:
        return PetFactory.build(purpose=PetPurpose.SELL, price=price, **kwargs)


class AdoptionRequestFactory:
    """Factory for creating test AdoptionRequest instances."""

    @staticmethod
    def build(pet: Pet, **kwargs) -> AdoptionRequest:
        defaults: Dict[str, Any] = {
            "id": uuid.uuid4(),
            "pet_id": pet.id,
            "adopter_email": f"adopter_{uuid.uuid4().hex[:8]}@example.com",
            "adopter_name": "Alex Adopter",
            "owner_email": pet.owner_email,
        }
        defaults.update(kwargs)
        return AdoptionRequest(**defaults)


class PurchaseFactory:
    """Factory for creating test Purchase instances."""

    @staticmethod
    def build(pet: Pet, **kwargs) -> Purchase:
        defaults: Dict[str, Any] = {
            "id": uuid.uuid4(),
            "pet_id": pet.id,
            "buyer_email": f"buyer_{uuid.uuid4().hex[:8]}@example.com",
            "buyer_name": "Blair Buyer",
            "amount": Decimal("250.00"),
        }
        defaults.update(kwargs)
        return Purchase(**defaults)


@pytest.fixture
def pet_factory():
    return PetFactory


@pytest.fixture
def adoption_factory():
    return AdoptionRequestFactory


@pytest.fixture
def purchase_factory():
    return PurchaseFactory


class FakeMailSender:
    """Records every send; raises for addresses listed in ``fail_for``."""

    def __init__(self, fail_for: Optional[List[str]] = None) -> None:
        self.fail_for = set(fail_for or [])
        self.sent: List[Dict[str, str]] = []
        self._lock = threading.Lock()

    def send(self, to: str, subject: str, body: str) -> None:
        if to in self.fail_for:
            raise MailDeliveryException("SMTP refused recipient", recipient=to)
        with self._lock:
            self.sent.append({"to": to, "subject": subject, "body": body})

    @property
    def recipients(self) -> List[str]:
        with self._lock:
            return [message["to"] for message in self.sent]


class FakeStore:
    """In-memory ReminderStore keyed by pet id."""

    def __init__(
        self,
        pets: Optional[List[Any]] = None,
        adoptions: Optional[Dict[uuid.UUID, Any]] = None,
        purchases: Optional[Dict[uuid.UUID, Any]] = None,
    ) -> None:
        self.pets = list(pets or [])
        self.adoptions = dict(adoptions or {})
        self.purchases = dict(purchases or {})
        self.fail_listing: Optional[Exception] = None
        self.fail_lookup_for: Dict[uuid.UUID, Exception] = {}
        self.fail_purchase_for: Dict[uuid.UUID, Exception] = {}
        self.lookups: List[uuid.UUID] = []

    async def find_pets_with_vaccinations(self) -> List[Any]:
        if self.fail_listing is not None:
            raise self.fail_listing
        return [pet for pet in self.pets if pet.vaccinations]

    async def find_accepted_adoption(self, pet_id: uuid.UUID) -> Optional[Any]:
        self.lookups.append(pet_id)
        if pet_id in self.fail_lookup_for:
            raise self.fail_lookup_for[pet_id]
        request = self.adoptions.get(pet_id)
        if request is None or request.status != AdoptionStatus.ACCEPTED:
            return None
        return request

    async def find_purchase(self, pet_id: uuid.UUID) -> Optional[Any]:
        if pet_id in self.fail_purchase_for:
            raise self.fail_purchase_for[pet_id]
        return self.purchases.get(pet_id)


@pytest.fixture
def fake_mail_sender() -> FakeMailSender:
    return FakeMailSender()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def bella(pet_factory) -> Pet:
    """Bella: rabies shot on 2023-01-10, due again on 2024-01-10."""
    return pet_factory.build(
        name="Bella",
        vaccinations=[{"vaccineType": "Rabies", "date": "2023-01-10"}],
    )


@pytest.fixture
def reset_package_logging():
    """Undo LoggingConfigurator changes so later tests log normally."""
    yield
    for name in ("pawpalace_core", ""):
        configured = logging.getLogger(name or None)
        for handler in list(configured.handlers):
            configured.removeHandler(handler)
    package_logger = logging.getLogger("pawpalace_core")
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
