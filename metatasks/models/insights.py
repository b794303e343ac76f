"""Insights models"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DatePreset(str, Enum):
    """Preset date ranges accepted by the insights endpoint"""
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    MAXIMUM = "maximum"
    DATA_MAXIMUM = "data_maximum"
    LAST_3D = "last_3d"
    LAST_7D = "last_7d"
    LAST_14D = "last_14d"
    LAST_28D = "last_28d"
    LAST_30D = "last_30d"
    LAST_90D = "last_90d"
    LAST_WEEK_MON_SUN = "last_week_mon_sun"
    LAST_WEEK_SUN_SAT = "last_week_sun_sat"
    LAST_QUARTER = "last_quarter"
    LAST_YEAR = "last_year"
    THIS_WEEK_MON_TODAY = "this_week_mon_today"
    THIS_WEEK_SUN_TODAY = "this_week_sun_today"
    THIS_YEAR = "this_year"


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    DAYS_28 = "days_28"
    MONTH = "month"
    LIFETIME = "lifetime"
    TOTAL_OVER_RANGE = "total_over_range"


class InsightMetric(str, Enum):
    """Instagram media insight metrics"""
    LIKES = "likes"
    COMMENTS = "comments"
    SAVES = "saves"
    SHARES = "shares"
    REACH = "reach"
    VIEWS = "views"
    TOTAL_INTERACTIONS = "total_interactions"
    PROFILE_VISITS = "profile_visits"
    FOLLOWS = "follows"


DEFAULT_REACTION_METRICS = [
    "post_reactions_like_total",
    "post_reactions_love_total",
    "post_reactions_wow_total",
    "post_reactions_haha_total",
    "post_reactions_sorry_total",
    "post_reactions_anger_total",
]

DEFAULT_MEDIA_METRICS = [
    InsightMetric.LIKES,
    InsightMetric.COMMENTS,
    InsightMetric.SAVES,
    InsightMetric.REACH,
]


class PostInsightsData(BaseModel):
    """Insights for one Facebook post. error is set when the fetch failed."""
    post_id: str
    total_insights: int = 0
    insights: List[Dict[str, Any]] = Field(default_factory=list)
    insights_summary: Dict[str, Any] = Field(default_factory=dict)
    period: Optional[str] = None
    error: Optional[str] = None


class PostInsightsOutput(BaseModel):
    posts: List[PostInsightsData] = Field(default_factory=list)
    total_posts: int = 0
    total_insights: int = 0


class Insight(BaseModel):
    name: Optional[str] = None
    period: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    value: Optional[int] = None


class MediaInsightsOutput(BaseModel):
    media_id: str
    insights: List[Insight] = Field(default_factory=list)
    total_insights: int = 0
