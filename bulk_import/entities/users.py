"""
User import definition: schema, rules and the typed create payload.
"""

import re
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from bulk_import.core.models import FieldSchema, is_blank
from bulk_import.core.rules import RuleConfigBuilder

from .base import EntityDefinition

USER_TYPES = ["ADMINISTRADOR", "CLINICA", "ORIENTADOR", "EXAMINADOR", "FAMILIA"]

UserType = Literal["ADMINISTRADOR", "CLINICA", "ORIENTADOR", "EXAMINADOR", "FAMILIA"]

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

REQUIRED_FIELDS = ["email", "user_type"]

OPTIONAL_FIELDS = [
    "full_name",
    "dni",
    "phone",
    "birth_date",
    "nationality",
    "address_street",
    "address_number",
    "address_floor",
    "address_city",
    "address_postal_code",
    "address_province",
    "address_country",
    "center_id",
    "center_ids",
    "specialty",
    "allowed_etapas",
    "allowed_courses",
    "allowed_groups",
    "allowed_tests",
    "payment_method",
    "observations",
]

LIST_FIELDS = (
    "center_ids",
    "allowed_etapas",
    "allowed_courses",
    "allowed_groups",
    "allowed_tests",
)

USERS_SCHEMA = FieldSchema(
    entity="usuarios",
    required_fields=REQUIRED_FIELDS,
    optional_fields=OPTIONAL_FIELDS,
    example={
        "email": "usuario@ejemplo.com",
        "user_type": "ORIENTADOR",
        "full_name": "Juan Pérez García",
        "dni": "12345678A",
        "phone": "+34 600123456",
        "center_id": "CTR_001",
        "allowed_etapas": '["Educación Primaria", "ESO"]',
        "allowed_courses": '["1º Primaria", "2º Primaria"]',
        "allowed_groups": '["A", "B"]',
    },
)


def build_user_rules() -> list[dict[str, Any]]:
    """Format rules (errors) and role completeness rules (warnings) for users."""
    return (
        RuleConfigBuilder()
        .add_regex("email", EMAIL_PATTERN, message="Email con formato inválido")
        .add_allowed_values("user_type", USER_TYPES, message="Tipo de usuario inválido: {value}")
        .add_required_when(
            "center_id", "user_type", ["ORIENTADOR"],
            message="ORIENTADOR debe tener un centro asignado",
        )
        .add_required_when(
            "center_ids", "user_type", ["CLINICA", "EXAMINADOR"],
            message="{when_value} debe tener al menos un centro asignado",
        )
        .add_required_when(
            "specialty", "user_type", ["CLINICA"],
            message="CLINICA debe tener una especialidad",
        )
        .add_required_when(
            "payment_method", "user_type", ["FAMILIA"],
            message="FAMILIA debe tener un método de pago",
        )
        .build()
    )


_DMY_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")


class UserRecord(BaseModel):
    """
    Typed create-user payload built from a validated raw record.

    Blank values are dropped, scalar values of list fields become
    one-element lists, and birth dates are accepted as ISO or dd/mm/yyyy.
    Unknown columns are passed through unchanged.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    email: str
    user_type: UserType
    full_name: str | None = None
    dni: str | None = None
    phone: str | None = None
    birth_date: date | None = None
    nationality: str | None = None
    address_street: str | None = None
    address_number: str | None = None
    address_floor: str | None = None
    address_city: str | None = None
    address_postal_code: str | None = None
    address_province: str | None = None
    address_country: str | None = None
    center_id: str | None = None
    center_ids: list[str] | None = None
    specialty: str | None = None
    allowed_etapas: list[str] | None = None
    allowed_courses: list[str] | None = None
    allowed_groups: list[str] | None = None
    allowed_tests: list[str] | None = None
    payment_method: str | None = None
    observations: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if not is_blank(value)}
        return data

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def wrap_scalar(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("birth_date", mode="before")
    @classmethod
    def parse_day_first_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            match = _DMY_DATE.fullmatch(value.strip())
            if match:
                day, month, year = match.groups()
                return datetime(int(year), int(month), int(day)).date()
        return value


USERS = EntityDefinition(
    field_schema=USERS_SCHEMA,
    rules=build_user_rules(),
    resource="/users",
    record_model=UserRecord,
)
