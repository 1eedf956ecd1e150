from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from edutrend.filters import DEFAULT_HORIZON


class SelectionModel(BaseModel):
    region: str = ""
    level: str = ""
    horizon: int = Field(default=DEFAULT_HORIZON)


class MetaRegionsResponse(BaseModel):
    regions: List[str]


class MetaLevelsResponse(BaseModel):
    levels: List[str]
