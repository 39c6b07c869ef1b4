"""Async HTTP client for the allotment API. Unwraps the {success, data, message} envelope."""

import logging
from typing import Any, List, Optional

import httpx

from allotment.api.v1.allotments.schemas import AllotmentView
from allotment.api.v1.classes.schemas import ClassResponse
from allotment.api.v1.sections.schemas import SectionResponse
from allotment.api.v1.students.schemas import StudentResponse
from allotment.client.config import client_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Any failed call: non-2xx response, success=false envelope, or transport error (status_code 0)."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AllotmentApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or client_settings.api_url).rstrip("/")
        if client is None:
            client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(timeout or client_settings.http_timeout_seconds, connect=10.0),
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AllotmentApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise ApiError(f"Could not reach the server ({type(e).__name__})") from e
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if response.is_error or not body.get("success", False):
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(message, response.status_code)
        return body.get("data")

    async def list_students(self) -> List[StudentResponse]:
        data = await self._request("GET", "/api/students")
        return [StudentResponse.model_validate(s) for s in data or []]

    async def list_classes(self) -> List[ClassResponse]:
        data = await self._request("GET", "/api/classes")
        return [ClassResponse.model_validate(c) for c in data or []]

    async def list_sections(self) -> List[SectionResponse]:
        data = await self._request("GET", "/api/sections")
        return [SectionResponse.model_validate(s) for s in data or []]

    async def list_allotments(self) -> List[AllotmentView]:
        data = await self._request("GET", "/api/allotments")
        return [AllotmentView.model_validate(a) for a in data or []]

    async def create_allotment(self, student_id: int, class_id: int, section_id: int) -> AllotmentView:
        data = await self._request(
            "POST",
            "/api/create-allotment",
            json={"studentId": student_id, "classId": class_id, "sectionId": section_id},
        )
        return AllotmentView.model_validate(data)

    async def update_allotment(self, allotment_id: int, class_id: int, section_id: int) -> AllotmentView:
        data = await self._request(
            "PUT",
            f"/api/allotments/{allotment_id}",
            json={"classId": class_id, "sectionId": section_id},
        )
        return AllotmentView.model_validate(data)

    async def delete_allotment(self, allotment_id: int) -> AllotmentView:
        data = await self._request("DELETE", f"/api/allotments/{allotment_id}")
        return AllotmentView.model_validate(data)
