"""Block service : création, mise à jour fusionnée, réordonnancement"""

import copy
import logging
from typing import Any, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sitecms.core.block_types import default_content_for, merge_policy_for, STYLES_POLICY
from sitecms.models.block import Block
from sitecms.models.page import Page
from sitecms.services.content_merger import (
    merge_content, MergeResult, REASON_STALE, REASON_NO_CHANGE
)

logger = logging.getLogger(__name__)

STATUS_APPLIED = "applied"
STATUS_STALE = REASON_STALE
STATUS_NO_CHANGE = REASON_NO_CHANGE


class BlockUpdateOutcome:
    def __init__(self, status: str, block: Block, content_result: Optional[MergeResult] = None,
                 styles_result: Optional[MergeResult] = None):
        self.status = status
        self.block = block
        self.content_result = content_result
        self.styles_result = styles_result

    @property
    def applied(self) -> bool:
        return self.status == STATUS_APPLIED


def next_position(db: Session, page_id: int) -> int:
    last = db.query(func.max(Block.position)).filter(Block.page_id == page_id).scalar()
    return 0 if last is None else last + 1


def get_page_blocks(db: Session, page_id: int, only_visible: bool = False) -> List[Block]:
    query = db.query(Block).filter(Block.page_id == page_id)
    if only_visible:
        query = query.filter(Block.visible == True)
    return query.order_by(Block.position, Block.id).all()


def create_block(db: Session, page: Page, block_type: str, content: Optional[dict] = None,
                 position: Optional[int] = None, visible: bool = True,
                 custom_styles: Optional[dict] = None) -> Block:
    # contenu vide => contenu par défaut du type
    final_content = content if content else default_content_for(block_type)
    final_position = position if position is not None else next_position(db, page.id)

    block = Block(
        page_id=page.id,
        type=block_type,
        content=final_content,
        position=final_position,
        visible=visible,
        custom_styles=custom_styles or {}
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    logger.info(f"Block {block.id} ({block_type}) created on page {page.id} at position {final_position}")
    return block


def _move_block(db: Session, block: Block, position: int) -> bool:
    # déplace le block puis renumérote la page en 0..n-1 (positions uniques)
    siblings = [b for b in get_page_blocks(db, block.page_id) if b.id != block.id]
    index = max(0, min(position, len(siblings)))
    siblings.insert(index, block)

    moved = False
    for new_position, sibling in enumerate(siblings):
        if sibling.position != new_position:
            sibling.position = new_position
            moved = True
    return moved


def update_block_content(db: Session, block: Block, content_patch: Optional[dict] = None,
                         styles_patch: Optional[dict] = None, client_timestamp: Any = None,
                         visible: Optional[bool] = None, position: Optional[int] = None) -> BlockUpdateOutcome:
    """
    Applique une édition partielle du dashboard sur un block.

    `content` et `custom_styles` sont fusionnés indépendamment avec les mêmes
    règles. Si l'une des deux fusions est périmée, la requête entière est
    ignorée (rien n'est écrit, `visible` compris).
    """
    content_result = None
    styles_result = None

    if content_patch is not None:
        content_result = merge_content(
            block.content, content_patch, client_timestamp, merge_policy_for(block.type)
        )
    if styles_patch is not None:
        styles_result = merge_content(
            block.custom_styles, styles_patch, client_timestamp, STYLES_POLICY
        )

    results = [r for r in (content_result, styles_result) if r is not None]
    if any(r.is_stale for r in results):
        logger.info(f"Block {block.id}: stale update ignored (client timestamp {client_timestamp})")
        return BlockUpdateOutcome(STATUS_STALE, block, content_result, styles_result)

    changed = False
    if content_result is not None and content_result.applied:
        block.content = content_result.value
        changed = True
    if styles_result is not None and styles_result.applied:
        block.custom_styles = styles_result.value
        changed = True
    if visible is not None and visible != block.visible:
        block.visible = visible
        changed = True
    if position is not None and _move_block(db, block, position):
        changed = True

    if not changed:
        logger.info(f"Block {block.id}: no changes detected, skipping write")
        return BlockUpdateOutcome(STATUS_NO_CHANGE, block, content_result, styles_result)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Block {block.id}: update failed: {e}")
        raise
    db.refresh(block)
    return BlockUpdateOutcome(STATUS_APPLIED, block, content_result, styles_result)


def reorder_blocks(db: Session, page_id: int, ordered_block_ids: List[int]) -> List[Block]:
    """
    Assigne des positions 0..n-1 aux blocks dans l'ordre donné.

    Les blocks de la page absents de la liste suivent, dans leur ordre
    précédent. Un seul commit pour tout le lot.
    """
    if len(set(ordered_block_ids)) != len(ordered_block_ids):
        raise ValueError("Duplicate block ids in reorder request")

    blocks = get_page_blocks(db, page_id)
    by_id = {block.id: block for block in blocks}

    unknown = [block_id for block_id in ordered_block_ids if block_id not in by_id]
    if unknown:
        raise ValueError(f"Blocks not on page {page_id}: {unknown}")

    listed = set(ordered_block_ids)
    ordered = [by_id[block_id] for block_id in ordered_block_ids]
    ordered += [block for block in blocks if block.id not in listed]

    try:
        for index, block in enumerate(ordered):
            block.position = index
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Reorder of page {page_id} failed: {e}")
        raise

    logger.info(f"Page {page_id}: {len(ordered)} blocks reordered")
    return ordered


def copy_block(db: Session, block: Block, target_page: Page) -> Block:
    """Copie un block tel quel à la fin d'une autre page"""
    return create_block(
        db,
        target_page,
        block.type,
        content=copy.deepcopy(block.content or {}),
        visible=block.visible,
        custom_styles=copy.deepcopy(block.custom_styles or {})
    )


def delete_block(db: Session, block: Block) -> None:
    db.delete(block)
    db.commit()
