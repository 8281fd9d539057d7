from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, List, Literal
from sitecms.schemas.block import BlockResponse, PublicBlock

# Schemas pour les pages

PageStatus = Literal["draft", "published"]

class PageCreate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    status: PageStatus = "draft"
    template: str = "default"
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    active: Optional[bool] = None
    duplicate: Optional[int] = None  # id de la page source à dupliquer

class PageUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    status: Optional[PageStatus] = None
    template: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    active: Optional[bool] = None

class PageResponse(BaseModel):
    id: int
    title: str
    slug: str
    status: str
    template: str
    meta_title: Optional[str]
    meta_description: Optional[str]
    active: bool
    published_at: Optional[datetime]
    created_by: Optional[str]
    updated_by: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageWithBlocks(PageResponse):
    blocks: List[BlockResponse] = []

class PageList(BaseModel):
    pages: List[PageResponse]
    total: int
    limit: int
    offset: int

class PublicPage(BaseModel):
    title: str
    slug: str
    template: str
    meta_title: Optional[str]
    meta_description: Optional[str]
    published_at: Optional[datetime]
    blocks: List[PublicBlock] = []
