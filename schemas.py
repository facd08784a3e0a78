# schemas.py
"""요청 본문 스키마"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    compare_url: Optional[str] = Field(default=None, alias="compareUrl")

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v):
        if not v.strip():
            raise ValueError("URL is required")
        return v.strip()

    @field_validator("compare_url")
    @classmethod
    def blank_compare_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class DashboardAnalyzeRequest(AnalyzeRequest):
    force_refresh: bool = Field(default=False, alias="forceRefresh")
