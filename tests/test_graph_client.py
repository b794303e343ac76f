"""Tests for the Graph API client"""

from unittest.mock import Mock

import pytest
import requests

from metatasks.api.auth import AuthStrategy
from metatasks.api.graph_client import GraphClient, decode_object, require_field
from metatasks.utils.exceptions import MalformedResponse, RemoteApiError

from .conftest import make_response


class TestGraphClient:
    """Request building and error mapping"""

    def test_build_url(self):
        client = GraphClient("t", api_base_url="https://graph.example.com/", api_version="v23.0", session=Mock())

        assert client.build_url("/123/feed") == "https://graph.example.com/v23.0/123/feed"

    def test_request_passes_timeouts_and_body(self, session, client):
        session.add("POST", "page/feed", make_response(200, {"id": "1"}))

        response = client.request("POST", "page/feed", json_body={"message": "hi"})

        assert response.ok
        assert response.status_code == 200
        call = session.calls[0]
        assert call["url"] == "https://graph.facebook.com/v24.0/page/feed"
        assert call["json"] == {"message": "hi"}
        assert call["timeout"] == (30, 60)

    def test_request_does_not_judge_status(self, session, client):
        session.add("GET", "x", make_response(500, text="boom"))

        response = client.request("GET", "x")

        assert not response.ok
        assert response.text == "boom"

    def test_timeout_becomes_remote_api_error(self):
        session = Mock()
        session.request.side_effect = requests.exceptions.ReadTimeout("read timed out")
        client = GraphClient("t", session=session)

        with pytest.raises(RemoteApiError, match="timeout"):
            client.request("GET", "x")

    def test_connection_error_becomes_remote_api_error(self):
        session = Mock()
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        client = GraphClient("t", session=session)

        with pytest.raises(RemoteApiError) as exc_info:
            client.request("GET", "x")

        assert exc_info.value.status_code is None

    def test_request_json_2xx_range(self, session, client):
        session.add("POST", "x", make_response(201, {"id": "9"}))

        assert client.request_json("POST", "x") == {"id": "9"}

    def test_request_field_returns_value(self, session, client):
        session.add("POST", "page/feed", make_response(200, {"id": 123}))

        assert client.request_field("POST", "page/feed", "id") == "123"

    def test_request_field_keeps_raw_body_when_missing(self, session, client):
        raw = '{"success":true,  "note": "no id here"}'
        session.add("POST", "page/feed", make_response(200, text=raw))

        with pytest.raises(MalformedResponse) as exc_info:
            client.request_field("POST", "page/feed", "id", action="create post")

        assert exc_info.value.body == raw
        assert raw in str(exc_info.value)

    def test_request_field_non_2xx(self, session, client):
        session.add("POST", "page/feed", make_response(400, text="bad"))

        with pytest.raises(RemoteApiError) as exc_info:
            client.request_field("POST", "page/feed", "id", action="create post")

        assert str(exc_info.value) == "Failed to create post: 400 - bad"

    def test_context_manager_closes_session(self):
        session = Mock()

        with GraphClient("t", session=session):
            pass

        session.close.assert_called_once()

    def test_repr_hides_token(self):
        client = GraphClient("super-secret", session=Mock())

        assert "super-secret" not in repr(client)


class TestAuthStrategy:
    def test_bearer_header(self):
        headers, params = AuthStrategy.BEARER_HEADER.apply("tok", {}, {"a": 1})

        assert headers == {"Authorization": "Bearer tok"}
        assert params == {"a": 1}

    def test_query_param_does_not_mutate_input(self):
        original = {"a": 1}

        headers, params = AuthStrategy.QUERY_PARAM.apply("tok", {}, original)

        assert headers == {}
        assert params == {"a": 1, "access_token": "tok"}
        assert original == {"a": 1}


class TestDecoding:
    def test_decode_object(self):
        assert decode_object('{"id": "1"}') == {"id": "1"}

    @pytest.mark.parametrize("body", ["not json", "[1, 2]", ""])
    def test_decode_object_rejects_non_objects(self, body):
        with pytest.raises(MalformedResponse):
            decode_object(body)

    def test_require_field(self):
        assert require_field({"id": 42}, "id") == "42"

        with pytest.raises(MalformedResponse):
            require_field({"id": ""}, "id")

    def test_remote_api_error_parses_graph_error(self):
        error = RemoteApiError(
            "Failed", status_code=400, body='{"error": {"message": "Invalid OAuth access token", "code": 190}}'
        )

        assert error.error_code == 190
        assert error.error_message == "Invalid OAuth access token"

    def test_remote_api_error_with_plain_body(self):
        error = RemoteApiError("Failed", status_code=502, body="<html>Bad Gateway</html>")

        assert error.error_code is None
        assert error.body == "<html>Bad Gateway</html>"
