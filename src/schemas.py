from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


HealthStatus = Literal["healthy", "degraded", "unhealthy"]


class FeedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_name: str | None = None
    creator: str | None = None
    title: str | None = None
    url: str
    published_at: datetime | None = None
    content: str | None = None
    excerpt: str | None = None
    categories: list[str] = Field(default_factory=list)


class AttemptRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate: str
    outcome: Literal["success", "failure"]
    elapsed_ms: int
    error: str | None = None


class ProbeError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    code: str | None = None
    details: Any = None


class ProbeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    status: HealthStatus
    elapsed_ms: int = 0
    message: str | None = None
    error: ProbeError | None = None
    data: Any = None


class AggregateReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: HealthStatus
    elapsed_ms: int
    probes: dict[str, ProbeResult]
    message: str


class ModelCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_name: str
    working_model: str
    response_ms: int
    attempted_models: list[str]
    total_attempts: int


class FeedResponse(BaseModel):
    url: str
    total: int
    items: list[FeedItem]
    attempts: list[AttemptRecord]
