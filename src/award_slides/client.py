"""
HTTP client for the awards API.

Used by the editor session to load and save the working copy. Every method
performs exactly one request: there are no retries and any failure is raised
as ``ApiError`` with the server's message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from .errors import ApiError
from .models import Awardee, UploadResult

logger = logging.getLogger(__name__)


def _parse(model: type[BaseModel], data: Any) -> Any:
    """Validate a response payload; a malformed payload is an API failure."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiError(f"Malformed {model.__name__} in response: {exc}") from exc


class AwardsApiClient:
    """Synchronous client bound to one base URL and bearer token."""

    def __init__(
        self,
        base_url: str = "",
        token: str = "",
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._headers = {"Authorization": f"Bearer {token}"}

    def __enter__(self) -> "AwardsApiClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._http.request(method, path, headers=self._headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"{method} {path} failed: {exc}")
            raise ApiError(str(exc)) from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"{method} {path} returned a non-JSON body", status_code=response.status_code) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") or body.get("detail") or response.reason_phrase
        raise ApiError(f"{response.status_code}: {message}", status_code=response.status_code)

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def list_awardees(self) -> List[Awardee]:
        data = self._request("GET", "/awardees")
        return [_parse(Awardee, item) for item in data.get("awardees", [])]

    def save_awardee(self, awardee: Awardee) -> Awardee:
        data = self._request("POST", "/awardees", json=awardee.to_record())
        return _parse(Awardee, data.get("awardee"))

    def save_batch(self, awardees: List[Awardee]) -> None:
        self._request("POST", "/awardees/batch", json={"awardees": [a.to_record() for a in awardees]})

    def delete_awardee(self, awardee_id: int) -> None:
        self._request("DELETE", f"/awardees/{awardee_id}")

    def upload_photo(self, filename: str, data: bytes, content_type: str = "application/octet-stream") -> UploadResult:
        payload = self._request("POST", "/upload-photo", files={"photo": (filename, data, content_type)})
        return _parse(UploadResult, payload)

    def get_categories(self) -> List[str]:
        return list(self._request("GET", "/custom-categories").get("categories", []))

    def save_categories(self, categories: List[str]) -> List[str]:
        data = self._request("POST", "/custom-categories", json={"categories": categories})
        return list(data.get("categories", []))
