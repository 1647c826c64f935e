"""
Tests for the HTTP client used by the editor.
"""

import httpx
import pytest

from award_slides.client import AwardsApiClient
from award_slides.errors import ApiError
from award_slides.models import Awardee


class TestAwardsApiClient:
    """Round trips against the in-process app."""

    def test_health(self, api_client):
        assert api_client.health() == {"status": "ok"}

    def test_save_and_list(self, api_client):
        saved = api_client.save_awardee(Awardee(id=3, name="Linus", tab_name="Kernel"))
        assert saved.tab_name == "Kernel"
        assert [a.name for a in api_client.list_awardees()] == ["Linus"]

    def test_delete(self, api_client):
        api_client.save_batch([Awardee(id=1), Awardee(id=2)])
        api_client.delete_awardee(1)
        assert [a.id for a in api_client.list_awardees()] == [2]

    def test_upload(self, api_client, photo_storage):
        result = api_client.upload_photo("me.png", b"png", "image/png")
        assert result.success is True
        assert result.photo_path in photo_storage.objects
        assert result.photo_url.startswith("https://storage.test/")

    def test_categories(self, api_client):
        assert api_client.save_categories(["Grit", "Grit"]) == ["Grit"]
        assert api_client.get_categories() == ["Grit"]


class TestErrors:
    """Failures surface as ApiError."""

    def test_unauthorized(self, anonymous_client):
        client = AwardsApiClient(token="wrong", http=anonymous_client)
        with pytest.raises(ApiError) as exc_info:
            client.list_awardees()
        assert exc_info.value.status_code == 401

    def test_server_error_message(self, api_client, photo_storage):
        photo_storage.fail_uploads = True
        with pytest.raises(ApiError) as exc_info:
            api_client.upload_photo("me.png", b"png")
        assert str(exc_info.value) == "500: upload refused"
        assert exc_info.value.status_code == 500

    def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(base_url="http://awards.test", transport=httpx.MockTransport(refuse))
        with AwardsApiClient(token="t", http=http) as client:
            with pytest.raises(ApiError) as exc_info:
                client.health()
        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    def test_malformed_record_in_response(self):
        def reply(request):
            return httpx.Response(200, json={"awardees": [{"id": 1, "layout": {"photo": {"x": None}}}]})

        http = httpx.Client(base_url="http://awards.test", transport=httpx.MockTransport(reply))
        with AwardsApiClient(token="t", http=http) as client:
            with pytest.raises(ApiError) as exc_info:
                client.list_awardees()
        assert "Malformed Awardee" in str(exc_info.value)

    def test_non_json_success_body(self):
        def reply(request):
            return httpx.Response(200, text="<html>proxy page</html>")

        http = httpx.Client(base_url="http://awards.test", transport=httpx.MockTransport(reply))
        with AwardsApiClient(token="t", http=http) as client:
            with pytest.raises(ApiError) as exc_info:
                client.health()
        assert exc_info.value.status_code == 200
