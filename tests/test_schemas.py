"""
Tests for the Pydantic schemas.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pawpalace_core.models import PetPurpose, PetSpecies
from pawpalace_core.schemas import (
    AdoptionRequestCreate,
    ManualRunResponse,
    PetCreate,
    PetResponse,
    PetUpdate,
    PetVaccinationUpdate,
    PurchaseCreate,
    ReminderRunResponse,
)
from pawpalace_core.schemas import reminders as reminder_schemas


@pytest.fixture
def valid_pet_data():
    return {
        "name": "  Bella  ",
        "species": "dog",
        "owner_email": "Owner@Example.com",
        "vaccinations": [
            {"vaccineType": "Rabies", "date": "2023-01-10"},
            {"vaccineType": "rabies", "date": "2024-01-10"},
        ],
    }


class TestPetCreate:
    """Test cases for PetCreate."""

    def test_valid_pet(self, valid_pet_data):
        pet = PetCreate(**valid_pet_data)

        assert pet.name == "Bella"
        assert pet.species == PetSpecies.DOG
        assert pet.purpose == PetPurpose.PET
        assert pet.owner_email == "owner@example.com"
        assert pet.vaccinations == [{"vaccine_type": "Rabies", "date": "2023-01-10"}]

    def test_vaccinations_must_be_a_list(self, valid_pet_data):
        valid_pet_data["vaccinations"] = {"vaccineType": "Rabies"}
        with pytest.raises(ValidationError, match="Invalid vaccinations array"):
            PetCreate(**valid_pet_data)

    def test_sale_requires_price(self, valid_pet_data):
        valid_pet_data["purpose"] = "sell"
        with pytest.raises(ValidationError, match="positive number"):
            PetCreate(**valid_pet_data)

        valid_pet_data["price"] = "120.00"
        assert PetCreate(**valid_pet_data).price == Decimal("120.00")

    def test_invalid_email(self, valid_pet_data):
        valid_pet_data["owner_email"] = "not-an-email"
        with pytest.raises(ValidationError):
            PetCreate(**valid_pet_data)

    def test_blank_name(self, valid_pet_data):
        valid_pet_data["name"] = "   "
        with pytest.raises(ValidationError):
            PetCreate(**valid_pet_data)


class TestPetUpdates:
    """Test cases for partial updates."""

    def test_empty_update(self):
        update = PetUpdate()
        assert update.vaccinations is None
        assert update.model_dump(exclude_unset=True) == {}

    def test_update_normalizes_vaccinations(self):
        update = PetUpdate(vaccinations=[{"vaccineType": " FIV ", "date": None}])
        assert update.vaccinations == [{"vaccine_type": "FIV", "date": None}]

    def test_switch_to_sale_needs_price(self):
        with pytest.raises(ValidationError):
            PetUpdate(purpose="sell")
        assert PetUpdate(purpose="sell", price=10).price == Decimal("10")

    def test_vaccination_update_requires_list(self):
        with pytest.raises(ValidationError, match="Invalid vaccinations array"):
            PetVaccinationUpdate(vaccinations=None)
        with pytest.raises(ValidationError, match="Invalid vaccinations array"):
            PetVaccinationUpdate(vaccinations="Rabies")


class TestPetResponse:
    """Test building responses from model instances."""

    def test_from_model(self, pet_factory):
        pet = pet_factory.build(
            vaccinations=[{"vaccineType": "Rabies", "date": "2023-01-10"}]
        )

        response = PetResponse.model_validate(pet)

        assert response.id == pet.id
        assert response.vaccinations[0].vaccine_type == "Rabies"
        assert response.vaccinations[0].date == "2023-01-10"


class TestAdoptionAndPurchaseSchemas:
    """Test cases for adoption and purchase input schemas."""

    def test_adoption_request(self):
        request = AdoptionRequestCreate(
            pet_id=uuid.uuid4(), adopter_email="Adopter@Example.com"
        )
        assert request.adopter_email == "adopter@example.com"
        assert request.owner_email is None

    def test_purchase_amount_non_negative(self):
        with pytest.raises(ValidationError):
            PurchaseCreate(
                pet_id=uuid.uuid4(), buyer_email="buyer@example.com", amount=-1
            )


class TestReminderSchemas:
    """Test cases for the reminder HTTP schemas."""

    def test_run_response_from_result_dict(self):
        pet_id = uuid.uuid4()
        response = ReminderRunResponse.model_validate(
            {
                "as_of": "2024-01-09",
                "success": True,
                "skipped": False,
                "error": None,
                "pets_evaluated": 1,
                "events": [
                    {
                        "pet_id": str(pet_id),
                        "pet_name": "Bella",
                        "vaccine_type": "Rabies",
                        "last_dose_date": "2023-01-10",
                        "next_due_date": "2024-01-10",
                    }
                ],
                "emails_queued": 1,
                "lookup_failures": 0,
                "suppressed": 0,
                "started_at": datetime(2024, 1, 9, 9, tzinfo=timezone.utc).isoformat(),
                "finished_at": None,
            }
        )

        assert response.as_of == date(2024, 1, 9)
        assert response.events[0].pet_id == pet_id
        body = ManualRunResponse(success=True, message="ok", result=response)
        assert body.model_dump(mode="json")["result"]["events"][0]["next_due_date"] == "2024-01-10"

    def test_email_request_validates_recipient(self):
        request = reminder_schemas.TestEmailRequest(
            to="Someone@Example.com", subject="Hi", message="Body"
        )
        assert request.to == "someone@example.com"

        with pytest.raises(ValidationError):
            reminder_schemas.TestEmailRequest(to="nobody", subject="Hi", message="Body")
