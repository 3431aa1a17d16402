from pydantic import BaseModel, Field
from typing import List
from datetime import date


class DocumentVersionResponse(BaseModel):
    title: str
    version_date: date
    file_name: str
    size: int


class DocumentListResponse(BaseModel):
    titles: List[str] = Field(default_factory=list)


class DocumentRename(BaseModel):
    title: str
