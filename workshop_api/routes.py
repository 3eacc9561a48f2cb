"""
HTTP routes for the workshop API.

`router` holds the public endpoints; `admin_router` holds everything that
requires a prior admin login in the same cookie session.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from workshop_api import auth, services
from workshop_api.auth import AdminSession, get_admin_session, require_admin
from workshop_api.config import Settings, get_settings
from workshop_api.db import DbClient
from workshop_api.dependencies import get_db_client
from workshop_api.errors import store_operation
from workshop_api.schemas import (
    AdminStatsResponse,
    AttendeeCreateRequest,
    AttendeeResponse,
    CountResponse,
    DesignationCountResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SessionPayload,
    SessionResponse,
    SessionWithSpeakersResponse,
    SpeakerPayload,
    SpeakerResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


# Public routes


@router.post("/attendees", response_model=AttendeeResponse, status_code=201)
def register_attendee(
    payload: AttendeeCreateRequest, db: DbClient = Depends(get_db_client)
):
    with store_operation("Failed to register attendee"):
        attendee = services.register_attendee(
            db,
            name=payload.name,
            email=payload.email,
            designation=payload.designation,
        )
    logger.info("Registered attendee %s", attendee.id)
    return AttendeeResponse.from_record(attendee)


@router.get("/attendees/count", response_model=CountResponse)
def attendee_count(db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to get count"):
        count = db.count_attendees()
    return CountResponse(count=count)


@router.get("/speakers", response_model=list[SpeakerResponse])
def list_speakers(db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to fetch speakers"):
        speakers = db.list_speakers()
    return [SpeakerResponse.from_record(s) for s in speakers]


@router.get("/sessions", response_model=list[SessionWithSpeakersResponse])
def list_sessions(db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to fetch sessions"):
        views = services.list_sessions_with_speakers(db)
    return [SessionWithSpeakersResponse.from_view(v) for v in views]


@router.post("/admin/login", response_model=LoginResponse)
def admin_login(
    payload: LoginRequest,
    session: AdminSession = Depends(get_admin_session),
    settings: Settings = Depends(get_settings),
):
    auth.login(payload.password, session, settings)
    return LoginResponse(success=True)


@router.post("/admin/logout", response_model=MessageResponse)
def admin_logout(session: AdminSession = Depends(get_admin_session)):
    auth.logout(session)
    return MessageResponse(message="Logged out successfully")


# Admin routes


@admin_router.get("/admin/stats", response_model=AdminStatsResponse)
def admin_stats(db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to get stats"):
        breakdown = services.get_designation_breakdown(db)
    return AdminStatsResponse(
        designation_breakdown=[
            DesignationCountResponse.from_record(item) for item in breakdown
        ]
    )


@admin_router.get("/attendees", response_model=list[AttendeeResponse])
def list_attendees(db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to fetch attendees"):
        attendees = db.list_attendees()
    return [AttendeeResponse.from_record(a) for a in attendees]


@admin_router.delete("/attendees/{attendee_id}", response_model=MessageResponse)
def delete_attendee(attendee_id: str, db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to delete attendee"):
        db.delete_attendee(attendee_id)
    return MessageResponse(message="Attendee deleted successfully")


@admin_router.post("/speakers", response_model=SpeakerResponse, status_code=201)
def create_speaker(payload: SpeakerPayload, db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to create speaker"):
        speaker = db.create_speaker(payload.to_record())
    return SpeakerResponse.from_record(speaker)


@admin_router.put("/speakers/{speaker_id}", response_model=SpeakerResponse)
def update_speaker(
    speaker_id: str, payload: SpeakerPayload, db: DbClient = Depends(get_db_client)
):
    with store_operation("Failed to update speaker"):
        speaker = services.update_speaker(db, speaker_id, payload.to_record())
    return SpeakerResponse.from_record(speaker)


@admin_router.delete("/speakers/{speaker_id}", response_model=MessageResponse)
def delete_speaker(speaker_id: str, db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to delete speaker"):
        db.delete_speaker(speaker_id)
    return MessageResponse(message="Speaker deleted successfully")


@admin_router.post("/sessions", response_model=SessionResponse, status_code=201)
def create_session(payload: SessionPayload, db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to create session"):
        session = db.create_session(payload.to_record())
    return SessionResponse.from_record(session)


@admin_router.put("/sessions/{session_id}", response_model=SessionResponse)
def update_session(
    session_id: str, payload: SessionPayload, db: DbClient = Depends(get_db_client)
):
    with store_operation("Failed to update session"):
        session = services.update_session(db, session_id, payload.to_record())
    return SessionResponse.from_record(session)


@admin_router.delete("/sessions/{session_id}", response_model=MessageResponse)
def delete_session(session_id: str, db: DbClient = Depends(get_db_client)):
    with store_operation("Failed to delete session"):
        db.delete_session(session_id)
    return MessageResponse(message="Session deleted successfully")
