from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sitecms.core.block_types import get_block_type, list_block_types
from sitecms.core.database import get_db
from sitecms.core.deps import get_current_admin
from sitecms.models.user import AdminUser
from sitecms.models.page import Page
from sitecms.models.block import Block
from sitecms.schemas.block import (
    BlockCreate, BlockUpdate, BlockResponse, BlockUpdateResponse,
    BlockReorder, BlockCopy, BlockTypeResponse
)
from sitecms.services import block_service
from typing import List

router = APIRouter(prefix="/blocks", tags=["blocks"])

UPDATE_MESSAGES = {
    block_service.STATUS_APPLIED: "Block updated successfully",
    block_service.STATUS_STALE: "No update: older client timestamp",
    block_service.STATUS_NO_CHANGE: "No changes",
}

def _get_page_or_404(db: Session, page_id: int) -> Page:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page

def _get_block_or_404(db: Session, block_id: int) -> Block:
    block = db.query(Block).filter(Block.id == block_id).first()
    if not block:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Block not found")
    return block

@router.get("/types", response_model=List[BlockTypeResponse])
def get_block_types(current_user: AdminUser = Depends(get_current_admin)):
    """Types de blocks disponibles et leur contenu par défaut"""
    return [block_type.to_dict() for block_type in list_block_types()]

@router.post("/pages/{page_id}/blocks", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def create_block(page_id: int, block_data: BlockCreate, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    """Ajouter un block à une page"""
    page = _get_page_or_404(db, page_id)
    if get_block_type(block_data.type) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown block type: {block_data.type}")

    return block_service.create_block(
        db,
        page,
        block_data.type,
        content=block_data.content,
        position=block_data.position,
        visible=block_data.visible,
        custom_styles=block_data.custom_styles
    )

@router.get("/pages/{page_id}/blocks", response_model=List[BlockResponse])
def list_blocks(page_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    """Blocks d'une page dans l'ordre de rendu"""
    _get_page_or_404(db, page_id)
    return block_service.get_page_blocks(db, page_id)

@router.put("/pages/{page_id}/reorder", response_model=List[BlockResponse])
def reorder_blocks(page_id: int, reorder: BlockReorder, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    """Réordonner les blocks d'une page en un seul lot"""
    _get_page_or_404(db, page_id)
    try:
        return block_service.reorder_blocks(db, page_id, reorder.block_ids)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/{block_id}", response_model=BlockResponse)
def get_block(block_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    return _get_block_or_404(db, block_id)

@router.put("/{block_id}", response_model=BlockUpdateResponse)
def update_block(block_id: int, block_data: BlockUpdate, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    """
    Modifier un block.

    Le contenu envoyé est un patch partiel fusionné avec le contenu stocké.
    Une édition périmée (clientUpdatedAt <= celui stocké) ou sans effet
    répond 200 avec le block inchangé ; le champ "status" permet de les
    distinguer d'une mise à jour appliquée.
    """
    block = _get_block_or_404(db, block_id)

    outcome = block_service.update_block_content(
        db,
        block,
        content_patch=block_data.content,
        styles_patch=block_data.custom_styles,
        client_timestamp=block_data.client_updated_at,
        visible=block_data.visible,
        position=block_data.position
    )
    return {
        "status": outcome.status,
        "message": UPDATE_MESSAGES[outcome.status],
        "block": BlockResponse.model_validate(outcome.block)
    }

@router.post("/{block_id}/copy", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def copy_block(block_id: int, copy_data: BlockCopy, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    """Copier un block à la fin d'une autre page"""
    block = _get_block_or_404(db, block_id)
    target_page = _get_page_or_404(db, copy_data.target_page_id)
    return block_service.copy_block(db, block, target_page)

@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_block(block_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    block = _get_block_or_404(db, block_id)
    block_service.delete_block(db, block)
