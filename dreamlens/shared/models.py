from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

@dataclass(frozen=True)
class Principal:
    id: str
    email: Optional[str] = None

class AnalysisRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    dream_content: str = Field(alias="dreamContent", min_length=1)

class AnalysisResult(BaseModel):
    # extra keys from the model are carried through untouched
    model_config = ConfigDict(strict=True, extra="allow")

    title: str = Field(min_length=1)
    interpretation: str = Field(min_length=1)
    mood: str = Field(min_length=1)
    keywords: List[str]

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump()
