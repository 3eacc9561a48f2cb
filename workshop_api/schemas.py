"""
Pydantic schemas for the workshop API.

Response models serialize with camelCase aliases to match the stored
documents and what the frontend expects.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from workshop_api.records import (
    Attendee,
    DesignationCount,
    Session,
    SessionWithSpeakers,
    Speaker,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttendeeCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    designation: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        # Validate only; the address is stored exactly as submitted.
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"invalid email address: {e}") from e
        return value


class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1)


class SpeakerPayload(BaseModel):
    name: str = ""
    bio: str = ""
    avatar: str = ""
    linkedin: str = ""
    twitter: str = ""

    def to_record(self) -> Speaker:
        return Speaker(**self.model_dump())


class SessionPayload(BaseModel):
    title: str = ""
    description: str = ""
    time: str = ""
    speakers: list[str] = Field(default_factory=list)

    def to_record(self) -> Session:
        return Session(**self.model_dump())


class AttendeeResponse(ApiModel):
    id: str
    name: str
    email: str
    designation: str
    created_at: datetime

    @classmethod
    def from_record(cls, attendee: Attendee) -> "AttendeeResponse":
        return cls.model_validate(asdict(attendee))


class SpeakerResponse(ApiModel):
    id: str
    name: str
    bio: str
    avatar: str = ""
    linkedin: str = ""
    twitter: str = ""

    @classmethod
    def from_record(cls, speaker: Speaker) -> "SpeakerResponse":
        return cls.model_validate(asdict(speaker))


class SessionResponse(ApiModel):
    id: str
    title: str
    description: str
    time: str
    speakers: list[str]

    @classmethod
    def from_record(cls, session: Session) -> "SessionResponse":
        return cls.model_validate(asdict(session))


class SessionWithSpeakersResponse(SessionResponse):
    speaker_details: list[SpeakerResponse] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: SessionWithSpeakers) -> "SessionWithSpeakersResponse":
        return cls.model_validate(
            {
                **asdict(view.session),
                "speaker_details": [asdict(s) for s in view.speaker_details],
            }
        )


class DesignationCountResponse(ApiModel):
    designation: str
    count: int

    @classmethod
    def from_record(cls, item: DesignationCount) -> "DesignationCountResponse":
        return cls.model_validate(asdict(item))


class AdminStatsResponse(ApiModel):
    designation_breakdown: list[DesignationCountResponse]


class CountResponse(BaseModel):
    count: int


class LoginResponse(BaseModel):
    success: bool


class MessageResponse(BaseModel):
    message: str
