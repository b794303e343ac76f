"""Facebook Page post tasks"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from ..api.graph_client import GraphClient
from ..models.insights import (
    DEFAULT_REACTION_METRICS,
    DatePreset,
    Period,
    PostInsightsData,
    PostInsightsOutput,
)
from ..models.posts import (
    CreatePostOutput,
    DeletePostsOutput,
    FetchType,
    ListPostsOutput,
    SchedulePostOutput,
)
from ..utils.enums import parse_enum
from ..utils.exceptions import InvalidArgument
from ..utils.logger import get_logger
from .batch_processor import process_batch

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 25


def _scheduled_time_param(value: Union[str, int, datetime]) -> str:
    """Graph accepts a unix timestamp or an ISO-8601 string; datetimes become unix seconds"""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return str(int(value.timestamp()))
    value = str(value).strip()
    if not value:
        raise InvalidArgument("scheduled_publish_time is required")
    return value


def _require_ids(ids: Sequence[str], name: str) -> List[str]:
    ids = [str(i) for i in (ids or [])]
    if not ids:
        raise InvalidArgument(f"{name} must contain at least one ID")
    return ids


class FacebookService:
    """Post management for a Facebook Page"""

    def __init__(self, client: GraphClient):
        self.client = client

    def create_post(
        self,
        page_id: str,
        message: Optional[str] = None,
        link: Optional[str] = None,
    ) -> CreatePostOutput:
        body = self._post_body(message, link)
        body["published"] = True

        post_id = self.client.request_field(
            "POST", f"{page_id}/feed", "id", json_body=body, action="create post"
        )
        logger.info("Facebook post created", page_id=page_id, post_id=post_id)
        return CreatePostOutput(post_id=post_id, message=message, link=link)

    def schedule_post(
        self,
        page_id: str,
        scheduled_publish_time: Union[str, int, datetime],
        message: Optional[str] = None,
        link: Optional[str] = None,
    ) -> SchedulePostOutput:
        schedule_time = _scheduled_time_param(scheduled_publish_time)
        body = self._post_body(message, link)
        body["published"] = False
        body["scheduled_publish_time"] = schedule_time

        post_id = self.client.request_field(
            "POST", f"{page_id}/feed", "id", json_body=body, action="schedule post"
        )
        logger.info(
            "Facebook post scheduled",
            page_id=page_id,
            post_id=post_id,
            scheduled_publish_time=schedule_time,
        )
        return SchedulePostOutput(
            post_id=post_id,
            message=message,
            link=link,
            scheduled_publish_time=schedule_time,
            published=False,
        )

    def list_posts(
        self,
        page_id: str,
        fields: Optional[str] = None,
        limit: Optional[int] = None,
        fetch_type: FetchType = FetchType.FETCH,
    ) -> ListPostsOutput:
        """List one page of the Page feed"""
        fetch_type = parse_enum(FetchType, fetch_type)
        params: Dict[str, Any] = {}
        if fields:
            params["fields"] = fields
        params["limit"] = limit if limit is not None else DEFAULT_LIST_LIMIT

        response = self.client.request_json(
            "GET", f"{page_id}/feed", params=params, action="list posts"
        )
        data = response.get("data")
        rows = [row for row in data if isinstance(row, dict)] if isinstance(data, list) else []

        if fetch_type == FetchType.FETCH_ONE:
            row = rows[0] if rows else None
            output = ListPostsOutput(row=row, size=1 if row is not None else 0)
        elif fetch_type == FetchType.NONE:
            output = ListPostsOutput(size=len(rows))
        else:
            output = ListPostsOutput(rows=rows, size=len(rows))

        logger.info("Retrieved Facebook posts", page_id=page_id, size=output.size)
        return output

    def delete_posts(self, post_ids: Sequence[str]) -> DeletePostsOutput:
        """
        Delete posts one by one

        A post counts as deleted only on a 2xx answer carrying success: true.
        Failed IDs are reported in failed_post_ids and left out of deleted_post_ids.
        """
        post_ids = _require_ids(post_ids, "post_ids")

        def delete_one(post_id: str) -> Dict[str, Any]:
            return self.client.request_json("DELETE", post_id, action=f"delete post {post_id}")

        outcome = process_batch(
            post_ids,
            delete_one,
            accept=lambda payload: payload.get("success") is True,
            action="delete post",
        )
        return DeletePostsOutput(
            deleted_post_ids=outcome.succeeded_ids,
            failed_post_ids=outcome.failed,
            total_deleted=outcome.total_succeeded,
            total_failed=outcome.total_failed,
            all_success=outcome.all_success,
        )

    def get_post_insights(
        self,
        post_ids: Sequence[str],
        metrics: Optional[Sequence[str]] = None,
        period: Period = Period.LIFETIME,
        date_preset: Optional[DatePreset] = DatePreset.TODAY,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> PostInsightsOutput:
        """
        Fetch insights for each post

        Unlike delete, a failed post still gets an entry (with error set and
        no insights), so the output has exactly one entry per requested ID.
        date_preset only applies when neither since nor until is given.
        """
        post_ids = _require_ids(post_ids, "post_ids")
        period = parse_enum(Period, period)
        if isinstance(metrics, str):
            metrics = [m.strip() for m in metrics.split(",") if m.strip()]
        params: Dict[str, Any] = {
            "period": period.value,
            "metric": ",".join(metrics if metrics else DEFAULT_REACTION_METRICS),
        }
        if date_preset is not None and not since and not until:
            params["date_preset"] = parse_enum(DatePreset, date_preset).value
        if since:
            params["since"] = since
        if until:
            params["until"] = until

        def fetch_one(post_id: str) -> PostInsightsData:
            response = self.client.request_json(
                "GET", f"{post_id}/insights", params=dict(params), action="get post insights"
            )
            return _parse_post_insights(post_id, response, period.value)

        outcome = process_batch(post_ids, fetch_one, action="fetch insights for post")

        posts = []
        for item in outcome.items:
            if item.succeeded:
                posts.append(item.value)
            else:
                posts.append(PostInsightsData(post_id=item.identifier, error=f"Failed: {item.reason}"))

        total_insights = sum(p.total_insights for p in posts)
        logger.info(
            "Processed post insights",
            total_posts=len(posts),
            total_insights=total_insights,
            failed=outcome.total_failed,
        )
        return PostInsightsOutput(posts=posts, total_posts=len(posts), total_insights=total_insights)

    @staticmethod
    def _post_body(message: Optional[str], link: Optional[str]) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if message is not None:
            body["message"] = message
        if link is not None:
            body["link"] = link
        return body


def _parse_post_insights(post_id: str, response: Dict[str, Any], period: str) -> PostInsightsData:
    insights = []
    summary = {}
    data = response.get("data")
    for insight in data if isinstance(data, list) else []:
        if not isinstance(insight, dict):
            continue
        insights.append(insight)
        if "name" in insight and "values" in insight:
            summary[str(insight["name"])] = insight["values"]

    return PostInsightsData(
        post_id=post_id,
        total_insights=len(insights),
        insights=insights,
        insights_summary=summary,
        period=period,
    )
