"""Task runner: the seam between the workflow host and the Graph API services"""

import threading
from typing import Any, Callable, Dict, Optional

import requests
from pydantic import BaseModel

from .api.graph_client import GraphClient
from .services.container_poller import ContainerPoller
from .services.facebook_service import FacebookService
from .services.instagram_service import InstagramService
from .services.publishing import MediaPublishWorkflow
from .utils.config import Settings, load_settings
from .utils.exceptions import InvalidArgument
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)

_MISSING = object()


class TaskContext:
    """Services wired to one per-invocation GraphClient"""

    def __init__(self, client: GraphClient, poller: ContainerPoller):
        self.client = client
        self.facebook = FacebookService(client)
        self.instagram = InstagramService(client, MediaPublishWorkflow(client, poller))


def _required(props: Dict[str, Any], key: str) -> Any:
    value = props.get(key, _MISSING)
    if value is _MISSING or value is None or value == "":
        raise InvalidArgument(f"Missing required property: {key}")
    return value


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


TASKS: Dict[str, Callable[[TaskContext, Dict[str, Any]], BaseModel]] = {
    "facebook.CreatePost": lambda ctx, p: ctx.facebook.create_post(
        _required(p, "pageId"), message=p.get("message"), link=p.get("link")
    ),
    "facebook.SchedulePost": lambda ctx, p: ctx.facebook.schedule_post(
        _required(p, "pageId"),
        _required(p, "scheduledPublishTime"),
        message=p.get("message"),
        link=p.get("link"),
    ),
    "facebook.ListPosts": lambda ctx, p: ctx.facebook.list_posts(
        _required(p, "pageId"),
        fields=p.get("fields"),
        limit=p.get("limit"),
        fetch_type=p.get("fetchType") or "FETCH",
    ),
    "facebook.DeletePost": lambda ctx, p: ctx.facebook.delete_posts(_as_list(_required(p, "postIds"))),
    "facebook.GetPostInsights": lambda ctx, p: ctx.facebook.get_post_insights(
        _as_list(_required(p, "postIds")),
        metrics=p.get("metrics"),
        period=p.get("period") or "lifetime",
        date_preset=p.get("datePreset", "today"),
        since=p.get("since"),
        until=p.get("until"),
    ),
    "instagram.CreateImagePost": lambda ctx, p: ctx.instagram.create_image_post(
        _required(p, "igId"), _required(p, "imageUrl"), caption=p.get("caption")
    ),
    "instagram.CreateVideoPost": lambda ctx, p: ctx.instagram.create_video_post(
        _required(p, "igId"),
        _required(p, "videoUrl"),
        caption=p.get("caption"),
        media_type=p.get("mediaType") or "VIDEO",
    ),
    "instagram.CreateCarouselPost": lambda ctx, p: ctx.instagram.create_carousel_post(
        _required(p, "igId"), _as_list(_required(p, "mediaUrls")), caption=p.get("caption")
    ),
    "instagram.ListMedia": lambda ctx, p: ctx.instagram.list_media(
        _required(p, "igId"),
        limit=p.get("limit"),
        fields=p.get("fields"),
        fetch_type=p.get("fetchType") or "FETCH",
    ),
    "instagram.GetMediaInsights": lambda ctx, p: ctx.instagram.get_media_insights(
        _required(p, "mediaId"), metrics=p.get("metrics")
    ),
}


class TaskRunner:
    """Run one task per call; every call gets its own client, closed on exit"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.settings = settings or load_settings()
        self.session_factory = session_factory

    @classmethod
    def from_config(cls, path: Optional[str] = None) -> "TaskRunner":
        settings = load_settings(path)
        setup_logger(
            log_level=settings.logging.level,
            log_format=settings.logging.format,
            file_path=settings.logging.file_path,
            max_bytes=settings.logging.max_bytes,
            backup_count=settings.logging.backup_count,
        )
        logger.info(
            "Configuration loaded",
            api_base_url=settings.graph.api_base_url,
            api_version=settings.graph.api_version,
            auth_strategy=settings.graph.auth_strategy.value,
        )
        return cls(settings)

    def run(
        self,
        task_type: str,
        properties: Dict[str, Any],
        cancel_event: Optional[threading.Event] = None,
    ) -> BaseModel:
        """
        Run a task

        Args:
            task_type: e.g. "facebook.CreatePost", "instagram.CreateVideoPost"
            properties: Rendered task properties (camelCase keys)
            cancel_event: Set by the host to abort a long media-processing wait

        Returns:
            The task's output model
        """
        task = TASKS.get(task_type)
        if task is None:
            raise InvalidArgument(f"Unknown task type: {task_type}")

        graph = self.settings.graph
        polling = self.settings.polling
        access_token = _required(properties, "accessToken")

        logger.info("Running task", task_type=task_type)
        with GraphClient(
            access_token=access_token,
            api_base_url=properties.get("apiBaseUrl") or properties.get("host") or graph.api_base_url,
            api_version=properties.get("apiVersion") or graph.api_version,
            auth_strategy=graph.auth_strategy,
            connection_timeout=graph.connection_timeout,
            read_timeout=graph.read_timeout,
            session=self.session_factory(),
        ) as client:
            poller = ContainerPoller(
                client,
                poll_interval=float(properties.get("pollInterval", polling.poll_interval)),
                initial_delay=float(properties.get("initialDelay", polling.initial_delay)),
                max_wait=float(properties.get("maxWait", polling.max_wait)),
                status_read_timeout=polling.status_read_timeout,
                cancel_event=cancel_event,
            )
            output = task(TaskContext(client, poller), properties)

        logger.info("Task completed", task_type=task_type)
        return output
