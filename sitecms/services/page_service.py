# IMPORTS
import copy
import logging
import re
import time
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sitecms.core.block_types import default_content_for, merge_policy_for
from sitecms.models.block import Block
from sitecms.models.page import Page
from sitecms.services.block_service import get_page_blocks
from sitecms.services.content_merger import apply_defaults, strip_client_stamp

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 100
CLEARABLE_PAGE_FIELDS = {"meta_title", "meta_description"}

_UMLAUTS = {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"}


class SlugConflictError(Exception):
    def __init__(self, slug: str):
        super().__init__(f"A page with slug '{slug}' already exists")
        self.slug = slug


# func 1: slugify()
def slugify(text: str) -> str:
    slug = (text or "").lower()
    for char, replacement in _UMLAUTS.items():
        slug = slug.replace(char, replacement)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-") or "page"


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Page.id).filter(Page.slug == slug)
    if exclude_id is not None:
        query = query.filter(Page.id != exclude_id)
    return query.first() is not None


# func 2: generate_unique_slug()
def generate_unique_slug(db: Session, base_slug: str, exclude_id: Optional[int] = None) -> str:
    # base, base-copy, base-copy-2, base-copy-3 ...
    candidate = base_slug
    for counter in range(1, MAX_SLUG_ATTEMPTS + 1):
        if not _slug_taken(db, candidate, exclude_id):
            return candidate
        candidate = f"{base_slug}-copy" if counter == 1 else f"{base_slug}-copy-{counter}"

    return f"{base_slug}-copy-{int(time.time() * 1000)}"


# func 3: create_page()
def create_page(db: Session, title: str, username: str, slug: Optional[str] = None, status: str = "draft",
                template: str = "default", meta_title: Optional[str] = None,
                meta_description: Optional[str] = None, active: Optional[bool] = None) -> Page:
    final_slug = generate_unique_slug(db, slugify(slug or title))

    page = Page(
        title=title,
        slug=final_slug,
        status=status,
        template=template,
        meta_title=meta_title or title,
        meta_description=meta_description,
        active=True if active is None else active,
        published_at=datetime.utcnow() if status == "published" else None,
        created_by=username
    )
    db.add(page)
    db.commit()
    db.refresh(page)
    logger.info(f"Page {page.id} created with slug '{final_slug}' by {username}")
    return page


# func 4: update_page()
def update_page(db: Session, page: Page, changes: dict, username: str) -> Page:
    if changes.get("slug"):
        new_slug = slugify(changes["slug"])
        if _slug_taken(db, new_slug, exclude_id=page.id):
            raise SlugConflictError(new_slug)
        changes["slug"] = new_slug

    # premier passage en "published" => date de publication
    if changes.get("status") == "published" and page.status != "published" and not page.published_at:
        page.published_at = datetime.utcnow()

    # seuls les champs envoyés arrivent ici ; null efface les champs optionnels
    for field, value in changes.items():
        if value is None and field not in CLEARABLE_PAGE_FIELDS:
            continue
        setattr(page, field, value)
    page.updated_by = username

    db.commit()
    db.refresh(page)
    return page


# func 5: duplicate_page()
def duplicate_page(db: Session, source: Page, username: str, title: Optional[str] = None) -> Page:
    new_title = title or f"{source.title} (Copy)"
    new_page = Page(
        title=new_title,
        slug=generate_unique_slug(db, source.slug or slugify(source.title)),
        status="draft",  # une copie est toujours un brouillon
        template=source.template or "default",
        meta_title=source.meta_title or new_title,
        meta_description=source.meta_description,
        active=source.active,
        published_at=None,
        created_by=username
    )
    db.add(new_page)
    db.flush()

    for index, block in enumerate(get_page_blocks(db, source.id)):
        db.add(Block(
            page_id=new_page.id,
            type=block.type,
            content=copy.deepcopy(block.content or {}),
            position=index,
            visible=block.visible,
            custom_styles=copy.deepcopy(block.custom_styles or {})
        ))

    db.commit()
    db.refresh(new_page)
    logger.info(f"Page {source.id} duplicated as {new_page.id} ('{new_page.slug}')")
    return new_page


# func 6: delete_page()
def delete_page(db: Session, page: Page) -> None:
    # les blocks partent avec la page (cascade)
    db.delete(page)
    db.commit()


# func 7: get_page_with_blocks()
def get_page_with_blocks(db: Session, page_id: int) -> Tuple[Optional[Page], List[Block]]:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        return None, []
    return page, get_page_blocks(db, page_id)


# func 8: get_published_page()
def get_published_page(db: Session, slug: str) -> Tuple[Optional[Page], List[Block]]:
    page = db.query(Page).filter(
        Page.slug == slug,
        Page.status == "published",
        Page.active == True
    ).first()
    if not page:
        return None, []
    return page, get_page_blocks(db, page.id, only_visible=True)


# func 9: render_block()
def render_block(block: Block) -> dict:
    """Vue publique d'un block : contenu stocké superposé aux valeurs par défaut du type"""
    content = apply_defaults(
        strip_client_stamp(block.content),
        default_content_for(block.type),
        merge_policy_for(block.type)
    )
    return {
        "id": block.id,
        "type": block.type,
        "position": block.position,
        "content": content,
        "custom_styles": strip_client_stamp(block.custom_styles)
    }
