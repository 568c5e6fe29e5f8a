"""Permission, role and group value models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Permission(BaseModel):
    """A protected resource paired with the action performed on it."""

    model_config = ConfigDict(frozen=True)

    resource: str = Field(min_length=1)
    action: str = Field(min_length=1)

    @field_validator("resource", "action")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cannot be empty or whitespace")
        return v

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


class Group(BaseModel):
    """A group membership as reported by an identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    display_name: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id cannot be empty or whitespace")
        return v


class Role(BaseModel):
    """A named group of users that permissions are granted to."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    display_name: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id cannot be empty or whitespace")
        return v

    @classmethod
    def from_group(cls, group: Group) -> Role:
        return cls(id=group.id, display_name=group.display_name)

    def __str__(self) -> str:
        return self.id
