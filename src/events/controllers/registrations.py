from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema

from .base import EventPipelineController


@api_controller("/events/{event_id}", auth=JWTAuth(), tags=["Registrations"], throttle=UserDefaultThrottle())
class RegistrationController(EventPipelineController):
    @route.post(
        "/registration",
        url_name="event_registration",
        response={201: schema.RegistrationSchema},
        throttle=WriteThrottle(),
    )
    def register(
        self, event_id: UUID, payload: schema.RegistrationCreateSchema
    ) -> tuple[int, models.EventRegistration]:
        """Register for an event.

        A previously cancelled registration is reactivated instead of creating a new one.
        Fails when the registration window is closed, the caller is already registered or the event is full.
        """
        return 201, self.pipeline.register(event_id, self.principal(), payload.answers).unwrap()

    @route.delete(
        "/registration",
        url_name="event_registration",
        response=schema.RegistrationSchema,
        throttle=WriteThrottle(),
    )
    def unregister(self, event_id: UUID) -> models.EventRegistration:
        """Cancel the caller's registration. It can be reactivated by registering again."""
        return self.pipeline.unregister(event_id, self.principal()).unwrap()

    @route.get("/registrations", url_name="list_registrations", response=list[schema.RegistrationSchema])
    def list_registrations(self, event_id: UUID) -> list[models.EventRegistration]:
        """All registrations of the event, active and cancelled, in registration order."""
        return self.pipeline.list_registrations(event_id, self.principal()).unwrap()
