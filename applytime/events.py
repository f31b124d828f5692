# applytime/events.py
"""
Event model for the provisioning run's JSON stream.

Only the `apply_complete` subtype is consumed. Every other message is kept
as a bare tag with an empty hook so its payload is never validated.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

APPLY_COMPLETE = "apply_complete"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        # JSON null decodes to the zero value of the field.
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class Resource(_Record):
    address: str = Field("", alias="addr", description="Fully qualified resource address")
    implied_provider: str = Field("", description="Logical provider name")
    resource_type: str = Field("", description="Resource type within the provider")
    resource_name: str = Field("", description="Resource name (not aggregated)")


class Hook(_Record):
    action: str = Field("", description="Operation label, e.g. create/update/delete")
    resource: Resource = Field(default_factory=Resource)
    elapsed_seconds: int = Field(0, ge=0, strict=True, description="Seconds spent on this resource")


class Message(_Record):
    type: str = Field("", description="Discriminant tag")
    hook: Hook = Field(default_factory=Hook)

    @property
    def is_completion(self) -> bool:
        return self.type == APPLY_COMPLETE

    @classmethod
    def from_obj(cls, obj: Dict[str, Any]) -> "Message":
        """
        Build a message from a decoded JSON object.

        Raises pydantic.ValidationError when the tag is not a string or when
        an apply_complete hook does not fit the schema.
        """
        tag = obj.get("type", "")
        if tag != APPLY_COMPLETE:
            return cls.model_validate({"type": tag})
        return cls.model_validate(obj)
