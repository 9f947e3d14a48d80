from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, field_validator


class TranslationOut(BaseModel):
    locale: str
    key: str
    value: str


class BulkTranslateRequest(BaseModel):
    locale: str | None = None
    keys: list[str]
    count: int | None = None
    scope: list[str] | None = None
    default: str | None = None
    default_keys: list[str] = []
    values: dict[str, str | int | float] = {}

    @field_validator("keys")
    @classmethod
    def validate_keys(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one key is required")
        return v

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, str | int | float]) -> dict[str, str | int | float]:
        reserved = {"count", "scope", "default"} & set(v)
        if reserved:
            raise ValueError(f"Reserved interpolation names: {', '.join(sorted(reserved))}")
        return v


class BulkTranslationOut(BaseModel):
    locale: str
    values: list[str]


class LocaleOut(BaseModel):
    id: UUID
    code: str
    name: str | None = None


class UntranslatedOut(BaseModel):
    key: str
    raw_key: str | None = None
