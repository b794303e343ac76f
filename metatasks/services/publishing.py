"""Instagram media publish workflow: container creation, readiness polling, publish"""

from typing import List, Optional

from ..api.graph_client import GraphClient
from ..models.media import (
    VIDEO_MEDIA_TYPES,
    MediaContainer,
    MediaKind,
    MediaType,
    PublishResult,
    is_video_url,
)
from ..utils.exceptions import InvalidArgument
from ..utils.logger import get_logger
from .container_poller import ContainerPoller

logger = get_logger(__name__)

MIN_CAROUSEL_ITEMS = 2
MAX_CAROUSEL_ITEMS = 10


class MediaPublishWorkflow:
    """Turn one or more media URLs into a single published Instagram post"""

    def __init__(self, client: GraphClient, poller: Optional[ContainerPoller] = None):
        self.client = client
        self.poller = poller or ContainerPoller(client)

    def create_container(
        self,
        account_id: str,
        media_url: str,
        kind: MediaKind,
        caption: Optional[str] = None,
        media_type: Optional[MediaType] = None,
    ) -> MediaContainer:
        """
        Create a media container

        Args:
            account_id: Instagram professional account ID
            media_url: Public URL of the image or video
            kind: IMAGE, VIDEO or CAROUSEL_CHILD
            caption: Optional caption (ignored by the provider for carousel children)
            media_type: Video media type (VIDEO, REELS, STORIES); VIDEO when omitted

        Returns:
            The created container
        """
        params = {}
        if kind == MediaKind.IMAGE:
            params["image_url"] = media_url
        elif kind == MediaKind.VIDEO:
            params["video_url"] = media_url
            params["media_type"] = (media_type or MediaType.VIDEO).value
        elif kind == MediaKind.CAROUSEL_CHILD:
            params["is_carousel_item"] = True
            if is_video_url(media_url):
                params["video_url"] = media_url
                params["media_type"] = MediaType.VIDEO.value
            else:
                params["image_url"] = media_url
        else:
            raise InvalidArgument(f"Use create_carousel_container for {kind.value} containers")

        if caption is not None:
            params["caption"] = caption

        logger.info(
            "Creating media container",
            account_id=account_id,
            kind=kind.value,
            media_type=params.get("media_type"),
            media_url=media_url,
        )
        container_id = self.client.request_field(
            "POST",
            f"{account_id}/media",
            "id",
            json_body=params,
            action="create media container",
        )
        container = MediaContainer(id=container_id, kind=kind, media_url=media_url)
        logger.info("Media container created", container_id=container.id, kind=kind.value)
        return container

    def create_carousel_container(
        self,
        account_id: str,
        child_ids: List[str],
        caption: Optional[str] = None,
    ) -> MediaContainer:
        params = {
            "media_type": MediaType.CAROUSEL.value,
            "children": ",".join(child_ids),
        }
        if caption is not None:
            params["caption"] = caption

        logger.info("Creating carousel container", account_id=account_id, child_count=len(child_ids))
        container_id = self.client.request_field(
            "POST",
            f"{account_id}/media",
            "id",
            json_body=params,
            action="create carousel container",
        )
        return MediaContainer(id=container_id, kind=MediaKind.CAROUSEL)

    def await_ready(self, container_id: str) -> None:
        self.poller.await_ready(container_id)

    def publish(self, account_id: str, container_id: str) -> str:
        """Publish a ready container and return the new media ID"""
        media_id = self.client.request_field(
            "POST",
            f"{account_id}/media_publish",
            "id",
            json_body={"creation_id": container_id},
            action="publish media",
        )
        logger.info("Media published", container_id=container_id, media_id=media_id)
        return media_id

    def run_image(self, account_id: str, image_url: str, caption: Optional[str] = None) -> PublishResult:
        # Images are processed synchronously; no polling
        container = self.create_container(account_id, image_url, MediaKind.IMAGE, caption=caption)
        media_id = self.publish(account_id, container.id)
        return PublishResult(media_id=media_id, container_id=container.id)

    def run_video(
        self,
        account_id: str,
        video_url: str,
        media_type: MediaType = MediaType.VIDEO,
        caption: Optional[str] = None,
    ) -> PublishResult:
        try:
            media_type = MediaType(media_type)
        except ValueError:
            raise InvalidArgument(f"Unknown media type: {media_type}")
        if media_type not in VIDEO_MEDIA_TYPES:
            raise InvalidArgument(
                f"Video media type must be one of {[t.value for t in VIDEO_MEDIA_TYPES]}, got {media_type.value}"
            )

        container = self.create_container(
            account_id, video_url, MediaKind.VIDEO, caption=caption, media_type=media_type
        )
        self.await_ready(container.id)
        media_id = self.publish(account_id, container.id)
        return PublishResult(media_id=media_id, container_id=container.id)

    def run_carousel(
        self,
        account_id: str,
        media_urls: List[str],
        caption: Optional[str] = None,
    ) -> PublishResult:
        """
        Publish a carousel of 2-10 items

        Children are created one at a time in input order, which fixes the
        slide order. Video children must finish processing before the
        carousel container can reference them.
        """
        if not MIN_CAROUSEL_ITEMS <= len(media_urls) <= MAX_CAROUSEL_ITEMS:
            raise InvalidArgument(
                f"Carousel must contain between {MIN_CAROUSEL_ITEMS} and {MAX_CAROUSEL_ITEMS} "
                f"media items. You provided {len(media_urls)}."
            )

        children = []
        for idx, media_url in enumerate(media_urls, 1):
            logger.info(f"Creating carousel child {idx}/{len(media_urls)}", media_url=media_url)
            children.append(self.create_container(account_id, media_url, MediaKind.CAROUSEL_CHILD))

        for child in children:
            if child.is_video:
                self.await_ready(child.id)

        child_ids = [child.id for child in children]
        carousel = self.create_carousel_container(account_id, child_ids, caption=caption)
        media_id = self.publish(account_id, carousel.id)
        return PublishResult(media_id=media_id, container_id=carousel.id, child_container_ids=child_ids)
