from common.controllers import UserAwareController
from events.service.pipeline import EventPipeline


class EventPipelineController(UserAwareController):
    """Base controller for endpoints backed by the event pipeline.

    The pipeline resolves the principal itself; controllers only unwrap its results.
    """

    pipeline = EventPipeline()

    def principal(self) -> str:
        """The principal passed to the pipeline: the authenticated user's email."""
        return self.user().email
