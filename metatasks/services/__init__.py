"""Task services built on the Graph client"""

from .batch_processor import process_batch
from .container_poller import ContainerPoller, PollState
from .publishing import MediaPublishWorkflow
from .facebook_service import FacebookService
from .instagram_service import InstagramService

__all__ = [
    "process_batch",
    "ContainerPoller",
    "PollState",
    "MediaPublishWorkflow",
    "FacebookService",
    "InstagramService",
]
