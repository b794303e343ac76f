"""Media container and publish models"""

from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

VIDEO_EXTENSIONS = (".mp4", ".mov")


class MediaType(str, Enum):
    """Instagram media_type values"""
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    REELS = "REELS"
    STORIES = "STORIES"
    CAROUSEL = "CAROUSEL"


VIDEO_MEDIA_TYPES = (MediaType.VIDEO, MediaType.REELS, MediaType.STORIES)


class MediaKind(str, Enum):
    """What a container was created for"""
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    CAROUSEL_CHILD = "CAROUSEL_CHILD"
    CAROUSEL = "CAROUSEL"


class ContainerStatus(str, Enum):
    """Container status_code values reported by the provider"""
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    PUBLISHED = "PUBLISHED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ContainerStatus":
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN


def is_video_url(url: str) -> bool:
    """Classify a media URL by file extension, ignoring query string and fragment"""
    path = urlparse(url).path.lower()
    return path.endswith(VIDEO_EXTENSIONS)


class MediaContainer(BaseModel):
    """Provider-side staging object for not-yet-published media"""
    model_config = ConfigDict(frozen=True)

    id: str
    kind: MediaKind
    media_url: Optional[str] = None

    @property
    def is_video(self) -> bool:
        if self.kind == MediaKind.VIDEO:
            return True
        return self.kind == MediaKind.CAROUSEL_CHILD and bool(self.media_url) and is_video_url(self.media_url)


class PublishResult(BaseModel):
    """Terminal output of the media publish workflow"""
    model_config = ConfigDict(frozen=True)

    media_id: str
    container_id: str
    child_container_ids: List[str] = Field(default_factory=list)


class ImagePostOutput(BaseModel):
    media_id: str
    container_id: str
    image_url: str
    caption: Optional[str] = None


class VideoPostOutput(BaseModel):
    media_id: str
    container_id: str
    video_url: str
    caption: Optional[str] = None
    media_type: str


class CarouselPostOutput(BaseModel):
    media_id: str
    carousel_container_id: str
    child_container_ids: List[str]
    media_urls: List[str]
    caption: Optional[str] = None
