from datetime import date, time

from pydantic import BaseModel, field_validator


class AppointmentRequest(BaseModel):
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    branch_id: int
    appointment_date: date
    start_time: time

    @field_validator('customer_name')
    @classmethod
    def validate_customer_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Customer name is required.')
        return normalized

    @field_validator('customer_email')
    @classmethod
    def validate_customer_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        local_part, _, domain = normalized.partition('@')
        if not local_part or '.' not in domain:
            raise ValueError('Email should be valid.')
        return normalized

    @field_validator('customer_phone')
    @classmethod
    def validate_customer_phone(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        return normalized or None


class AppointmentResponse(BaseModel):
    id: int
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    booking_reference: str
    status: str
    appointment_date: date
    start_time: time
    end_time: time
    branch_name: str
    branch_address: str | None = None
