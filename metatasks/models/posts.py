"""Facebook post and Instagram media listing models"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FetchType(str, Enum):
    """How list results are returned"""
    FETCH = "FETCH"
    FETCH_ONE = "FETCH_ONE"
    NONE = "NONE"


class MediaField(str, Enum):
    """Fields that can be requested when listing Instagram media"""
    ID = "id"
    MEDIA_TYPE = "media_type"
    MEDIA_URL = "media_url"
    PERMALINK = "permalink"
    THUMBNAIL_URL = "thumbnail_url"
    TIMESTAMP = "timestamp"
    CAPTION = "caption"
    USERNAME = "username"
    COMMENTS_COUNT = "comments_count"
    LIKE_COUNT = "like_count"
    IS_SHARED_TO_FEED = "is_shared_to_feed"
    BOOST_ADS_LIST = "boost_ads_list"
    BOOST_ELIGIBILITY_INFO = "boost_eligibility_info"
    IS_COMMENT_ENABLED = "is_comment_enabled"
    VIEW_COUNT = "view_count"


DEFAULT_MEDIA_FIELDS = [
    MediaField.ID,
    MediaField.MEDIA_TYPE,
    MediaField.MEDIA_URL,
    MediaField.PERMALINK,
    MediaField.THUMBNAIL_URL,
    MediaField.TIMESTAMP,
    MediaField.CAPTION,
]


class CreatePostOutput(BaseModel):
    post_id: str
    message: Optional[str] = None
    link: Optional[str] = None


class SchedulePostOutput(BaseModel):
    post_id: str
    message: Optional[str] = None
    link: Optional[str] = None
    scheduled_publish_time: str
    published: bool = False


class ListPostsOutput(BaseModel):
    """rows for FETCH, row for FETCH_ONE, only size for NONE"""
    rows: Optional[List[Dict[str, Any]]] = None
    row: Optional[Dict[str, Any]] = None
    size: int = 0


class DeletePostsOutput(BaseModel):
    deleted_post_ids: List[str] = Field(default_factory=list)
    failed_post_ids: List[str] = Field(default_factory=list)
    total_deleted: int = 0
    total_failed: int = 0
    all_success: bool = True


class MediaItem(BaseModel):
    id: Optional[str] = None
    media_type: Optional[str] = None
    media_url: Optional[str] = None
    permalink: Optional[str] = None
    thumbnail_url: Optional[str] = None
    timestamp: Optional[str] = None
    caption: Optional[str] = None


class ListMediaOutput(BaseModel):
    """media_items for FETCH, media_item for FETCH_ONE, only total_count for NONE"""
    media_items: Optional[List[MediaItem]] = None
    media_item: Optional[MediaItem] = None
    total_count: int = 0
