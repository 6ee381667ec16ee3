"""
REST implementation of the application store.

Talks to the dashboard API that owns the job_applications table. Wire
payloads use that API's camelCase field names.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from recruitment_pipeline.core.config import settings
from recruitment_pipeline.schemas.job_application import ApplicationRecord, StatusChange
from recruitment_pipeline.services.application_store import UpstreamStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable appliedDate %r, using current time", value)
    return datetime.now(timezone.utc)


def record_from_payload(item: Dict[str, Any]) -> ApplicationRecord:
    """Build an ApplicationRecord from a job application JSON object."""
    return ApplicationRecord(
        id=str(item["id"]),
        candidate_name=item.get("candidateName") or "Unknown",
        company=item.get("company") or "",
        role_applied=item.get("jobTitle") or "N/A",
        location=item.get("location"),
        experience=item.get("experience"),
        raw_status=item.get("status"),
        applied_on=_parse_datetime(item.get("appliedDate")),
    )


def status_change_from_payload(application_id: str, item: Dict[str, Any]) -> StatusChange:
    return StatusChange(
        application_id=application_id,
        previous_status=item.get("previousStatus"),
        new_status=item["newStatus"],
        action=item.get("action") or "update",
        reason=item.get("reason"),
        actor=item.get("actor"),
        created_at=_parse_datetime(item.get("createdAt")),
    )


class RemoteApplicationStore:
    """Application store backed by the dashboard REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.REMOTE_STORE_BASE_URL or "").rstrip("/")
        if not self.base_url:
            raise ValueError("REMOTE_STORE_BASE_URL is required for the remote application store")
        self.api_key = api_key if api_key is not None else settings.REMOTE_STORE_API_KEY
        self.timeout = timeout if timeout is not None else settings.REMOTE_STORE_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise UpstreamStoreError(
                f"Request to application store failed: {exc.__class__.__name__}",
                {"method": method, "path": path, "error": str(exc)},
            ) from exc

        if response.status_code >= 500:
            raise UpstreamStoreError(
                f"Application store returned {response.status_code}",
                {"method": method, "path": path, "status_code": response.status_code, "body": response.text[:500]},
            )
        return response

    def _json(self, response: httpx.Response, path: str) -> Any:
        if response.status_code >= 400:
            raise UpstreamStoreError(
                f"Application store rejected request with {response.status_code}",
                {"path": path, "status_code": response.status_code, "body": response.text[:500]},
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamStoreError("Application store returned invalid JSON", {"path": path}) from exc

    def _mapped(self, path: str, build: Callable[[], T]) -> T:
        """Run a payload mapping, reporting malformed payloads as store failures."""
        try:
            return build()
        except (KeyError, TypeError, AttributeError, ValidationError) as exc:
            raise UpstreamStoreError(
                "Application store returned an unexpected payload",
                {"path": path, "error": str(exc)},
            ) from exc

    def _application_path(self, application_id: str, suffix: str = "") -> str:
        return f"/applications/{quote(str(application_id), safe='')}{suffix}"

    async def fetch_applications(self, company: Optional[str] = None) -> List[ApplicationRecord]:
        params = {"company": company} if company is not None else None
        response = await self._request("GET", "/applications", params=params)
        items = self._json(response, "/applications")
        records = self._mapped("/applications", lambda: [record_from_payload(item) for item in items])
        if company is not None:
            wanted = company.lower()
            records = [record for record in records if record.company.lower() == wanted]
        return records

    async def get_application(self, application_id: str) -> Optional[ApplicationRecord]:
        path = self._application_path(application_id)
        response = await self._request("GET", path)
        if response.status_code == 404:
            return None
        payload = self._json(response, path)
        return self._mapped(path, lambda: record_from_payload(payload))

    async def update_status(
        self,
        application_id: str,
        new_status: str,
        *,
        expected_status: Optional[str],
        action: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> Optional[ApplicationRecord]:
        path = self._application_path(application_id, "/status")
        body: Dict[str, Any] = {
            "status": new_status,
            "expectedStatus": expected_status,
            "action": action,
        }
        if reason is not None:
            body["reason"] = reason
        if actor is not None:
            body["actor"] = actor

        response = await self._request("PATCH", path, json=body)
        # 404: gone; 409: status changed since it was read
        if response.status_code in (404, 409):
            return None
        payload = self._json(response, path)
        # Accept both {"application": {...}} and a bare record
        item = payload.get("application", payload) if isinstance(payload, dict) else payload
        return self._mapped(path, lambda: record_from_payload(item))

    async def status_history(self, application_id: str) -> List[StatusChange]:
        path = self._application_path(application_id, "/history")
        response = await self._request("GET", path)
        if response.status_code == 404:
            return []
        items = self._json(response, path)
        return self._mapped(path, lambda: [status_change_from_payload(application_id, item) for item in items])
