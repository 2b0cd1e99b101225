"""Payload assembly and submission."""

from rxdesk.payload.assembler import CaseDetailsAssembler, PayloadAssembler, PrescriptionAssembler
from rxdesk.payload.submission import SubmissionCoordinator, SubmissionProvider, SubmissionState

__all__ = [
    "PayloadAssembler",
    "PrescriptionAssembler",
    "CaseDetailsAssembler",
    "SubmissionCoordinator",
    "SubmissionProvider",
    "SubmissionState",
]
