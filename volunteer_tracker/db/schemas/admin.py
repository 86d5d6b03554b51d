import json
from typing import Optional
from pydantic import Field, field_validator, model_validator

from volunteer_tracker.utils.password_crypto import MIN_PASSWORD_LENGTH
from .common import CamelModel


class AdminVerifyRequest(CamelModel):
    password: str


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class GoogleSheetsConfig(CamelModel):
    sheet_id: str
    service_account: str

    @field_validator("sheet_id")
    @classmethod
    def _validate_sheet_id(cls, v: str):
        cleaned = (v or "").strip()
        if not cleaned:
            raise ValueError("Sheet ID is required")
        return cleaned

    @field_validator("service_account")
    @classmethod
    def _validate_service_account(cls, v: str):
        cleaned = (v or "").strip()
        if not cleaned:
            raise ValueError("Service account JSON is required")
        try:
            info = json.loads(cleaned)
        except json.JSONDecodeError:
            raise ValueError("Invalid service account JSON format")
        if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
            raise ValueError("Invalid service account JSON format")
        return cleaned


class GoogleSheetsConfigView(CamelModel):
    sheet_id: Optional[str] = None
    client_email: Optional[str] = None
    service_account_configured: bool = False
    last_sync_timestamp: Optional[str] = None
    last_pull_timestamp: Optional[str] = None
    auto_sync_enabled: bool = False
