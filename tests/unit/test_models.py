"""
Unit tests for request schemas.

Tests cover:
- Registration email format
- Symptom intensity range and required description
- Medication name and timestamp handling
- Ignored client-supplied ownership fields
"""

import pytest
from datetime import timezone
from pydantic import ValidationError

from health_api.models.auth import LoginRequest, RegisterRequest
from health_api.models.records import MedicationCreate, SymptomCreate


class TestRegisterRequest:
    """Tests for the registration schema."""

    @pytest.mark.parametrize("email", ["a@b.com", "first.last@mail.example.org", "x+tag@y.io"])
    def test_valid_emails(self, email):
        assert RegisterRequest(email=email, password="abcdef").email == email

    @pytest.mark.parametrize("email", ["ab.com", "a@b", "a b@c.com", "@b.com", "a@.com ", "a@b.com\n"])
    def test_invalid_emails(self, email):
        with pytest.raises(ValidationError):
            RegisterRequest(email=email, password="abcdef")

    def test_missing_password(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@b.com")

    def test_blank_full_name_stored_as_none(self):
        assert RegisterRequest(email="a@b.com", password="abcdef", full_name="  ").full_name is None


class TestLoginRequest:
    def test_empty_fields_rejected(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="", password="")


class TestSymptomCreate:
    """Tests for the symptom schema."""

    @pytest.mark.parametrize("intensity", [1, 5, 10])
    def test_intensity_in_range(self, intensity):
        assert SymptomCreate(description="Headache", intensity=intensity).intensity == intensity

    @pytest.mark.parametrize("intensity", [0, 11, 15, -1])
    def test_intensity_out_of_range(self, intensity):
        with pytest.raises(ValidationError):
            SymptomCreate(description="Headache", intensity=intensity)

    def test_intensity_optional(self):
        assert SymptomCreate(description="Headache").intensity is None

    @pytest.mark.parametrize("description", ["", "   ", "\t\n"])
    def test_blank_description_rejected(self, description):
        with pytest.raises(ValidationError) as exc_info:
            SymptomCreate(description=description)

        assert "Symptom description is required" in str(exc_info.value)

    def test_description_trimmed(self):
        assert SymptomCreate(description="  Headache ").description == "Headache"

    def test_ownership_fields_ignored(self):
        payload = SymptomCreate.model_validate({"description": "Cough", "user_id": 99, "id": 5})

        assert "user_id" not in payload.model_dump()
        assert "id" not in payload.model_dump()


class TestMedicationCreate:
    """Tests for the medication schema."""

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            MedicationCreate(name="  ")

        assert "Medication name is required" in str(exc_info.value)

    def test_naive_taken_at_is_utc(self):
        payload = MedicationCreate(name="Ibuprofen", taken_at="2025-01-15T10:30:00")

        assert payload.taken_at.tzinfo == timezone.utc
        assert payload.taken_at.hour == 10

    def test_offset_taken_at_kept(self):
        payload = MedicationCreate(name="Ibuprofen", taken_at="2025-01-15T10:30:00+02:00")

        assert payload.taken_at.utcoffset().total_seconds() == 7200

    def test_unreadable_taken_at_rejected(self):
        with pytest.raises(ValidationError):
            MedicationCreate(name="Ibuprofen", taken_at="yesterday-ish")
