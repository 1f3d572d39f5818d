from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LinkCreate(BaseModel):
    # a missing url is reported by the registry as a 400
    url: str | None = None
    code: str | None = None

class LinkOut(BaseModel):
    id: int
    code: str
    url: str
    hits: int
    created: datetime

    model_config = ConfigDict(from_attributes=True)

class PreviewOut(BaseModel):
    ok: bool
    status: int | None = None
    content_type: str | None = Field(default=None, alias="contentType")

    model_config = ConfigDict(populate_by_name=True)

class HealthOut(BaseModel):
    status: str
    version: str
    python: str
    environment: str
    port: int

class ErrorOut(BaseModel):
    error: str
