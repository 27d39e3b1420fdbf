"""Health check models for the Duo ``/oauth/v1/health_check`` endpoint."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class HealthCheckRequest:
    """Health check request parameters."""

    client_id: str
    client_assertion: str

    def to_form_data(self) -> dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_assertion": self.client_assertion,
        }


class HealthCheckResponse(BaseModel):
    """Health check response body.

    Successful responses carry ``stat == "OK"`` and a ``response`` timestamp.
    Failures carry ``stat == "FAIL"`` with ``message`` / ``message_detail``.
    """

    model_config = ConfigDict(extra="allow")

    stat: str | None = None
    response: dict | None = None
    code: int | None = None
    timestamp: int | None = None
    message: str | None = None
    message_detail: str | None = None

    def is_success(self) -> bool:
        return self.stat == "OK"
