from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sitecms.core.database import get_db
from sitecms.schemas.page import PublicPage
from sitecms.services.page_service import get_published_page, render_block

router = APIRouter(prefix="/public", tags=["public"])

@router.get("/pages/{slug}", response_model=PublicPage)
def get_public_page(slug: str, db: Session = Depends(get_db)):
    """Page publiée avec ses blocks visibles, prête pour le rendu du site"""
    page, blocks = get_published_page(db, slug)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")

    return {
        "title": page.title,
        "slug": page.slug,
        "template": page.template,
        "meta_title": page.meta_title,
        "meta_description": page.meta_description,
        "published_at": page.published_at,
        "blocks": [render_block(block) for block in blocks]
    }
