"""Canonical applicant-tracking entities consumed by the velocity engine."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RequisitionStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"
    ON_HOLD = "OnHold"
    CANCELED = "Canceled"


class CandidateDisposition(str, Enum):
    ACTIVE = "Active"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"
    HIRED = "Hired"


class EventType(str, Enum):
    STAGE_CHANGE = "STAGE_CHANGE"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"
    FEEDBACK_SUBMITTED = "FEEDBACK_SUBMITTED"
    OFFER_REQUESTED = "OFFER_REQUESTED"
    OFFER_APPROVED = "OFFER_APPROVED"
    OFFER_EXTENDED = "OFFER_EXTENDED"
    OFFER_ACCEPTED = "OFFER_ACCEPTED"
    OFFER_DECLINED = "OFFER_DECLINED"
    CANDIDATE_WITHDREW = "CANDIDATE_WITHDREW"
    REJECTION_SENT = "REJECTION_SENT"
    NOTE_ADDED = "NOTE_ADDED"
    EMAIL_SENT = "EMAIL_SENT"
    OUTREACH_SENT = "OUTREACH_SENT"


class Requisition(BaseModel):
    """Open headcount tracked by the ATS."""

    req_id: str
    req_title: str = ""
    function: str = ""
    job_family: str = ""
    level: str = ""
    location_region: str = ""
    location_type: str | None = None
    recruiter_id: str = ""
    hiring_manager_id: str = ""
    status: RequisitionStatus = RequisitionStatus.OPEN
    opened_at: datetime | None = None
    closed_at: datetime | None = None

    model_config = ConfigDict(extra="allow")


class Candidate(BaseModel):
    """A person in process against a single requisition."""

    candidate_id: str
    req_id: str
    name: str | None = None
    source: str = ""
    current_stage: str = ""
    disposition: CandidateDisposition = CandidateDisposition.ACTIVE
    applied_at: datetime | None = None
    first_contacted_at: datetime | None = None
    offer_extended_at: datetime | None = None
    offer_accepted_at: datetime | None = None
    offer_declined_at: datetime | None = None
    hired_at: datetime | None = None

    model_config = ConfigDict(extra="allow")


class Event(BaseModel):
    """Timestamped activity on a candidate."""

    event_id: str = ""
    req_id: str
    candidate_id: str
    event_type: EventType
    event_at: datetime
    from_stage: str | None = None
    to_stage: str | None = None
    actor_user_id: str | None = None

    model_config = ConfigDict(extra="allow")


class User(BaseModel):
    """Recruiter, hiring manager or other ATS user."""

    user_id: str
    name: str = ""
    role: str | None = None
    team: str | None = None
    email: str | None = None

    model_config = ConfigDict(extra="allow")
