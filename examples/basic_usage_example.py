#!/usr/bin/env python3
"""
Basic usage example for the pawpalace-core package.

Seeds an in-memory SQLite database with a dog whose rabies booster is due
tomorrow, accepts an adoption request for it, and runs one reminder pass.
Mail is printed to stdout instead of going through SMTP.
"""

import asyncio
import logging
from datetime import date, timedelta

from pawpalace_core.database import SessionManager, create_engine
from pawpalace_core.models import AdoptionRequest, Pet, PetSpecies
from pawpalace_core.models.base import Base
from pawpalace_core.reminders import SQLAlchemyPetStore
from pawpalace_core.runtime import ReminderRuntime
from pawpalace_core.utils.config import AppSettings, ReminderSettings


class PrintingMailSender:
    """Mail transport that writes each message to stdout."""

    def send(self, to: str, subject: str, body: str) -> None:
        print(f"--- to: {to}\nsubject: {subject}\n\n{body}\n")


async def seed(store: SQLAlchemyPetStore, as_of: date) -> None:
    last_dose = as_of + timedelta(days=1) - timedelta(days=365)
    pet = await store.add_pet(
        Pet(
            name="Bella",
            species=PetSpecies.DOG,
            owner_email="owner@example.com",
            vaccinations=[{"vaccineType": "Rabies", "date": last_dose.isoformat()}],
        )
    )
    request = await store.add_adoption_request(
        AdoptionRequest(
            pet_id=pet.id,
            adopter_email="adopter@example.com",
            adopter_name="Alex",
            owner_email=pet.owner_email,
        )
    )
    await store.accept_adoption(request.id)


async def main() -> None:
    logging.basicConfig(level=logging.INFO)

    engine = create_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_manager = SessionManager(engine)
    store = SQLAlchemyPetStore(session_manager)
    settings = AppSettings(reminders=ReminderSettings(run_on_startup=False))

    as_of = date.today()
    await seed(store, as_of)

    runtime = ReminderRuntime.build(
        settings, store, PrintingMailSender(), session_manager
    )
    try:
        result = await runtime.scheduler.trigger(as_of, reason="example")
    finally:
        await runtime.close()

    print(result.message)


if __name__ == "__main__":
    asyncio.run(main())
