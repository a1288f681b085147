"""Enums for the event pipeline."""

from enum import StrEnum


class EligibilityReason(StrEnum):
    """Why a participant cannot currently submit feedback."""

    NO_FEEDBACK_FORM = "no_feedback_form"
    NOT_ATTENDED = "not_attended"
    DEADLINE_PASSED = "deadline_passed"


class Messages(StrEnum):
    EVENT_NOT_FOUND = "Event not found."
    REGISTRATION_NOT_FOUND = "Registration not found."
    FEEDBACK_NOT_FOUND = "Feedback not found."
    IDENTITY_NOT_RESOLVED = "Could not resolve the caller identity."
    STAFF_REQUIRED = "Event staff capability required."
    ORGANIZER_REQUIRED = "Only the event creator or event staff can modify this event."
    REGISTRATION_NOT_STARTED = "Registration period has not started yet."
    REGISTRATION_ENDED = "Registration period has ended."
    ALREADY_REGISTERED = "Already registered for this event."
    EVENT_FULL = "Event is full."
    NO_ACTIVE_REGISTRATION = "No active registration found."
    CANCELLED_REGISTRATION = "Cannot validate attendance for a cancelled registration."
    UNVALIDATED_NOT_ALLOWED = "Use reset to clear attendance."
    FEEDBACK_ALREADY_SUBMITTED = "Feedback already submitted. Use update instead."
    FEEDBACK_DEADLINE_PASSED = "Cannot update feedback: deadline passed."
    FEEDBACK_INELIGIBLE = "Cannot submit feedback: {reason}"
