"""Explicit ambient identity passed into forms."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Who is acting: the signed-in user (doctor or lab staff) and their center."""

    user_id: str = ""
    organization_id: str = ""
    center_id: str = ""
    display_name: str = ""


@dataclass(frozen=True, slots=True)
class AppointmentContext:
    appointment_id: str = ""
    patient_id: str = ""
    patient_name: str = ""
    symptoms: str = ""


__all__ = ["SessionContext", "AppointmentContext"]
