from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service.feedback_service import FeedbackEligibility, FeedbackSummary

from .base import EventPipelineController


@api_controller("/events/{event_id}/feedback", auth=JWTAuth(), tags=["Feedback"], throttle=UserDefaultThrottle())
class FeedbackController(EventPipelineController):
    @route.get("/eligibility", url_name="feedback_eligibility", response=schema.FeedbackEligibilitySchema)
    def check_eligibility(self, event_id: UUID) -> FeedbackEligibility:
        """Whether the caller may submit feedback and, if not, why.

        Reasons are checked in order: no_feedback_form, not_attended, deadline_passed.
        """
        return self.pipeline.check_feedback_eligibility(event_id, self.principal()).unwrap()

    @route.post("", url_name="event_feedback", response={201: schema.FeedbackSchema}, throttle=WriteThrottle())
    def submit_feedback(
        self, event_id: UUID, payload: schema.FeedbackSubmitSchema
    ) -> tuple[int, models.EventFeedback]:
        """Submit feedback. Only confirmed attendees may submit, once, before the deadline."""
        return 201, self.pipeline.submit_feedback(event_id, self.principal(), payload.answers).unwrap()

    @route.put("", url_name="event_feedback", response=schema.FeedbackSchema, throttle=WriteThrottle())
    def update_feedback(self, event_id: UUID, payload: schema.FeedbackSubmitSchema) -> models.EventFeedback:
        """Replace the caller's feedback answers before the deadline."""
        return self.pipeline.update_feedback(event_id, self.principal(), payload.answers).unwrap()

    @route.get("", url_name="event_feedback", response=list[schema.FeedbackSchema])
    def list_feedback(self, event_id: UUID) -> list[models.EventFeedback]:
        """Every feedback response of the event. Event staff only."""
        return self.pipeline.list_feedback(event_id, self.principal()).unwrap()

    @route.get("/me", url_name="my_feedback", response={200: schema.FeedbackSchema, 204: None})
    def get_my_feedback(self, event_id: UUID) -> tuple[int, models.EventFeedback | None]:
        """The caller's own feedback, or 204 when none was submitted."""
        feedback = self.pipeline.get_own_feedback(event_id, self.principal()).unwrap()
        if feedback is None:
            return 204, None
        return 200, feedback

    @route.get("/summary", url_name="feedback_summary", response=schema.FeedbackSummarySchema)
    def get_summary(self, event_id: UUID) -> FeedbackSummary:
        """Response rate over the confirmed attendees. Event staff only."""
        return self.pipeline.feedback_summary(event_id, self.principal()).unwrap()

    @route.put("/form", url_name="feedback_form", response=schema.EventSchema, throttle=WriteThrottle())
    def update_feedback_form(self, event_id: UUID, payload: schema.FeedbackFormUpdateSchema) -> models.Event:
        """Configure the feedback form and deadline. Event staff only."""
        return self.pipeline.update_feedback_form(
            event_id, self.principal(), payload.feedback_form, payload.feedback_deadline
        ).unwrap()
