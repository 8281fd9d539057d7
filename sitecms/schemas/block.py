from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, Any, List

class BlockCreate(BaseModel):
    """Créer un block"""
    type: str  # "hero", "text", "features", "pricing", "testimonials", "faq", "contact", ...
    content: dict[str, Any] = {}  # vide => contenu par défaut du type
    position: Optional[int] = None  # absent => fin de page
    visible: bool = True
    custom_styles: dict[str, Any] = {}

class BlockUpdate(BaseModel):
    """Édition partielle d'un block (patch fusionné avec le contenu stocké)"""
    content: Optional[dict[str, Any]] = None
    custom_styles: Optional[dict[str, Any]] = None
    visible: Optional[bool] = None
    position: Optional[int] = None
    client_updated_at: Optional[float] = Field(default=None, alias="clientUpdatedAt")

    model_config = ConfigDict(populate_by_name=True)

class BlockResponse(BaseModel):
    """Block retourné"""
    id: int
    page_id: int
    type: str
    position: int
    visible: bool
    content: dict[str, Any]
    custom_styles: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class BlockUpdateResponse(BaseModel):
    """Résultat d'une édition : "applied", "stale" ou "no-change" """
    status: str
    message: str
    block: BlockResponse

class BlockReorder(BaseModel):
    block_ids: List[int]

class BlockCopy(BaseModel):
    target_page_id: int

class BlockTypeResponse(BaseModel):
    name: str
    label: str
    default_content: dict[str, Any]

class PublicBlock(BaseModel):
    id: int
    type: str
    position: int
    content: dict[str, Any]
    custom_styles: dict[str, Any]
