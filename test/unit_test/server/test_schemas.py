"""Unit tests for the v4 response envelope helpers."""

from unittest.mock import Mock

from fastapi import Request

from projects_service.server.schemas import get_request_id, wrap_error, wrap_response


class TestWrapResponse:
    def test_single_resource(self):
        assert wrap_response("r1", {"id": 1}) == {
            "id": "r1",
            "version": "v4",
            "result": {"success": True, "status": 200, "metadata": None, "content": {"id": 1}},
        }

    def test_list_with_total(self):
        envelope = wrap_response(None, [1, 2], total_count=7)

        assert envelope["result"]["metadata"] == {"totalCount": 7}
        assert envelope["id"] is None

    def test_status_code(self):
        assert wrap_response("r1", {}, status_code=201)["result"]["status"] == 201


class TestWrapError:
    def test_without_details(self):
        envelope = wrap_error("r2", 404, "not found")

        assert envelope["result"] == {
            "success": False,
            "status": 404,
            "metadata": None,
            "content": {"message": "not found"},
        }

    def test_with_details(self):
        assert wrap_error("r2", 400, "bad", [1])["result"]["content"]["details"] == [1]


class TestGetRequestId:
    def test_reads_request_state(self):
        request = Mock(spec=Request)
        request.state.request_id = "abc"

        assert get_request_id(request) == "abc"
