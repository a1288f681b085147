from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service.event_service import EventDetail

from .base import EventPipelineController


@api_controller("/events", auth=JWTAuth(), tags=["Events"], throttle=UserDefaultThrottle())
class EventController(EventPipelineController):
    @route.post("", url_name="create_event", response={201: schema.EventSchema}, throttle=WriteThrottle())
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Create an event. The caller becomes its creator."""
        return 201, self.pipeline.create_event(self.principal(), payload).unwrap()

    @route.get("/{event_id}", url_name="event_detail", response=schema.EventDetailSchema)
    def get_event(self, event_id: UUID) -> EventDetail:
        """Event details, its active registration count and whether the caller is registered."""
        return self.pipeline.get_event(event_id, self.principal()).unwrap()

    @route.put("/{event_id}", url_name="event_detail", response=schema.EventSchema, throttle=WriteThrottle())
    def update_event(self, event_id: UUID, payload: schema.EventEditSchema) -> models.Event:
        """Update an event. Only its creator or event staff may do so."""
        return self.pipeline.update_event(event_id, self.principal(), payload).unwrap()
