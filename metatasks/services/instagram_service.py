"""Instagram professional account tasks"""

from typing import Any, Dict, Optional, Sequence, Union

from ..api.graph_client import GraphClient
from ..models.insights import DEFAULT_MEDIA_METRICS, Insight, InsightMetric, MediaInsightsOutput
from ..models.media import CarouselPostOutput, ImagePostOutput, MediaType, VideoPostOutput
from ..models.posts import DEFAULT_MEDIA_FIELDS, FetchType, ListMediaOutput, MediaField, MediaItem
from ..utils.enums import parse_enum, parse_enum_values
from ..utils.logger import get_logger
from .publishing import MediaPublishWorkflow

logger = get_logger(__name__)

DEFAULT_MEDIA_LIMIT = 25


class InstagramService:
    """Publishing, listing and insights for an Instagram professional account"""

    def __init__(self, client: GraphClient, workflow: Optional[MediaPublishWorkflow] = None):
        self.client = client
        self.workflow = workflow or MediaPublishWorkflow(client)

    def create_image_post(self, ig_id: str, image_url: str, caption: Optional[str] = None) -> ImagePostOutput:
        logger.info("Creating Instagram image post", ig_id=ig_id, image_url=image_url)
        result = self.workflow.run_image(ig_id, image_url, caption=caption)
        return ImagePostOutput(
            media_id=result.media_id,
            container_id=result.container_id,
            image_url=image_url,
            caption=caption,
        )

    def create_video_post(
        self,
        ig_id: str,
        video_url: str,
        caption: Optional[str] = None,
        media_type: Union[MediaType, str] = MediaType.VIDEO,
    ) -> VideoPostOutput:
        media_type = parse_enum(MediaType, media_type)
        logger.info("Creating Instagram video post", ig_id=ig_id, video_url=video_url, media_type=media_type.value)
        result = self.workflow.run_video(ig_id, video_url, media_type=media_type, caption=caption)
        return VideoPostOutput(
            media_id=result.media_id,
            container_id=result.container_id,
            video_url=video_url,
            caption=caption,
            media_type=media_type.value,
        )

    def create_carousel_post(
        self,
        ig_id: str,
        media_urls: Sequence[str],
        caption: Optional[str] = None,
    ) -> CarouselPostOutput:
        media_urls = list(media_urls or [])
        logger.info("Creating Instagram carousel post", ig_id=ig_id, item_count=len(media_urls))
        result = self.workflow.run_carousel(ig_id, media_urls, caption=caption)
        return CarouselPostOutput(
            media_id=result.media_id,
            carousel_container_id=result.container_id,
            child_container_ids=list(result.child_container_ids),
            media_urls=media_urls,
            caption=caption,
        )

    def list_media(
        self,
        ig_id: str,
        limit: Optional[int] = None,
        fields: Optional[Sequence[Union[MediaField, str]]] = None,
        fetch_type: Union[FetchType, str] = FetchType.FETCH,
    ) -> ListMediaOutput:
        fetch_type = parse_enum(FetchType, fetch_type)
        field_names = parse_enum_values(MediaField, fields or DEFAULT_MEDIA_FIELDS)
        params = {
            "fields": ",".join(field_names),
            "limit": limit if limit is not None else DEFAULT_MEDIA_LIMIT,
        }
        response = self.client.request_json("GET", f"{ig_id}/media", params=params, action="list media")

        data = response.get("data")
        items = []
        for node in data if isinstance(data, list) else []:
            if isinstance(node, dict):
                items.append(MediaItem(**{k: _as_text(node.get(k)) for k in MediaItem.model_fields}))

        if fetch_type == FetchType.FETCH_ONE:
            item = items[0] if items else None
            output = ListMediaOutput(media_item=item, total_count=1 if item is not None else 0)
        elif fetch_type == FetchType.NONE:
            output = ListMediaOutput(total_count=len(items))
        else:
            output = ListMediaOutput(media_items=items, total_count=len(items))

        logger.info("Retrieved Instagram media", ig_id=ig_id, count=output.total_count)
        return output

    def get_media_insights(
        self,
        media_id: str,
        metrics: Optional[Sequence[Union[InsightMetric, str]]] = None,
    ) -> MediaInsightsOutput:
        metric_names = parse_enum_values(InsightMetric, metrics or DEFAULT_MEDIA_METRICS)
        response = self.client.request_json(
            "GET",
            f"{media_id}/insights",
            params={"metric": ",".join(metric_names)},
            action="get media insights",
        )

        data = response.get("data")
        insights = [
            _parse_insight(node) for node in (data if isinstance(data, list) else []) if isinstance(node, dict)
        ]
        logger.info("Retrieved media insights", media_id=media_id, total_insights=len(insights))
        return MediaInsightsOutput(media_id=media_id, insights=insights, total_insights=len(insights))


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_insight(node: Dict[str, Any]) -> Insight:
    value = None
    values = node.get("values")
    if isinstance(values, list) and values and isinstance(values[0], dict):
        raw = values[0].get("value")
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            value = int(raw)
        elif isinstance(raw, str) and raw.lstrip("-").isdigit():
            value = int(raw)
    return Insight(
        name=_as_text(node.get("name")),
        period=_as_text(node.get("period")),
        title=_as_text(node.get("title")),
        description=_as_text(node.get("description")),
        value=value,
    )
