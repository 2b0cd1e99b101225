"""Owning forms built from acquisition workflows and select fields."""

from rxdesk.forms.case_details import CaseDetailsForm
from rxdesk.forms.prescription import PrescriptionForm
from rxdesk.forms.vitals import DEFAULT_VITALS, VitalReading, VitalsPanel

__all__ = ["CaseDetailsForm", "PrescriptionForm", "DEFAULT_VITALS", "VitalReading", "VitalsPanel"]
