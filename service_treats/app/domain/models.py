"""
Request models for treat gateway operations.

Bodies arrive as loosely-typed JSON from an assistant, so any field that is
absent, empty or not a string counts as missing. Pydantic validation
failures are translated into the gateway's own ValidationError so callers
always see the documented messages.
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from shared.errors import TreatGatewayException, ValidationError, WalletRequiredError
from .wallets import normalize_wallet, resolve_target_wallet


MINT_MISSING_FIELDS = "Missing required fields. Need channelId, apiKey and either receiverId or wallet"
CHANNEL_MISSING_FIELDS = "Missing required fields. Need title, description, mediaUrl and reference"
INVALID_MEDIA_URL = "mediaUrl must start with http:// or https://"
INVALID_REFERENCE = "reference must be valid JSON"

# Error types that mean a field was absent, empty, not a string or that the
# body was not an object at all.
MISSING_ERROR_TYPES = {"missing", "string_type", "string_too_short", "model_type", "model_attributes_type"}


def _error_field(error: Dict[str, Any]) -> Any:
    return error["loc"][0] if error["loc"] else None


class MintRequest(BaseModel):
    """Validated mint-treat input."""

    model_config = ConfigDict(frozen=True)

    channel_id: StrictStr = Field(..., min_length=1, alias="channelId", description="Channel ID")
    api_key: StrictStr = Field(..., min_length=1, alias="apiKey", description="Channel API key")
    target_wallet: StrictStr = Field(..., min_length=1, description="receiverId, else wallet")

    @model_validator(mode="before")
    @classmethod
    def _choose_target_wallet(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["target_wallet"] = resolve_target_wallet(data.get("receiverId"), data.get("wallet"))
        return data

    @property
    def receiver_id(self) -> str:
        """Wallet forwarded upstream, always carrying a network suffix."""
        return normalize_wallet(self.target_wallet)

    @classmethod
    def from_payload(cls, payload: Any) -> "MintRequest":
        try:
            return cls.model_validate(payload)
        except PydanticValidationError:
            raise ValidationError(MINT_MISSING_FIELDS)


class CreateChannelRequest(BaseModel):
    """Validated create-channel input."""

    model_config = ConfigDict(frozen=True)

    title: StrictStr = Field(..., min_length=1, description="Channel name")
    description: StrictStr = Field(..., min_length=1, description="Channel description")
    media_url: StrictStr = Field(..., min_length=1, alias="mediaUrl", description="http(s) image URL")
    reference: StrictStr = Field(..., description="JSON document, serialized")
    wallet: StrictStr = Field(..., min_length=1, description="Owner NEAR wallet")

    @field_validator("media_url")
    @classmethod
    def _check_media_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise PydanticCustomError("media_url_scheme", INVALID_MEDIA_URL)
        return value

    @field_validator("reference", mode="before")
    @classmethod
    def _reference_string(cls, value: Any) -> Any:
        if value is None or value == "":
            raise PydanticCustomError("missing", "Field required")
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        if not isinstance(value, str):
            raise PydanticCustomError("reference_json", INVALID_REFERENCE)
        try:
            json.loads(value)
        except ValueError:
            raise PydanticCustomError("reference_json", INVALID_REFERENCE)
        return value

    @field_validator("wallet")
    @classmethod
    def _normalize_wallet(cls, value: str) -> str:
        return normalize_wallet(value)

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateChannelRequest":
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise cls._translate(e.errors())

    @staticmethod
    def _translate(errors) -> TreatGatewayException:
        """Pick the one error reported to the caller, most basic problem first."""
        if any(err["type"] in MISSING_ERROR_TYPES and _error_field(err) != "wallet" for err in errors):
            return ValidationError(CHANNEL_MISSING_FIELDS)
        if any(err["type"] == "media_url_scheme" for err in errors):
            return ValidationError(INVALID_MEDIA_URL)
        if any(_error_field(err) == "wallet" for err in errors):
            return WalletRequiredError()
        if any(err["type"] == "reference_json" for err in errors):
            return ValidationError(INVALID_REFERENCE)
        return ValidationError(CHANNEL_MISSING_FIELDS)

    def to_upstream(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)
