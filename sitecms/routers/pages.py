from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sitecms.core.config import settings
from sitecms.core.database import get_db
from sitecms.core.deps import get_current_admin
from sitecms.models.user import AdminUser
from sitecms.models.page import Page
from sitecms.schemas.block import BlockResponse
from sitecms.schemas.page import PageCreate, PageUpdate, PageResponse, PageWithBlocks, PageList
from sitecms.services import page_service
from typing import Optional

router = APIRouter(prefix="/pages", tags=["pages"])

def _get_page_or_404(db: Session, page_id: int) -> Page:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page

# Crée une page (ou duplique une page existante avec "duplicate")
@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(page_data: PageCreate, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    if page_data.duplicate is not None:
        source = db.query(Page).filter(Page.id == page_data.duplicate).first()
        if not source:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Source page not found")
        return page_service.duplicate_page(db, source, current_user.username, title=page_data.title)

    if not page_data.title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")

    return page_service.create_page(
        db,
        title=page_data.title,
        username=current_user.username,
        slug=page_data.slug,
        status=page_data.status,
        template=page_data.template,
        meta_title=page_data.meta_title,
        meta_description=page_data.meta_description,
        active=page_data.active
    )

@router.get("", response_model=PageList)
def list_pages(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = settings.DEFAULT_PAGE_LIMIT,
    offset: int = 0,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    # Pages du site, les plus récemment modifiées d'abord
    query = db.query(Page)
    if status_filter and status_filter != "all":
        query = query.filter(Page.status == status_filter)

    total = query.count()
    pages = query.order_by(Page.updated_at.desc(), Page.id.desc()).offset(offset).limit(limit).all()
    return {"pages": pages, "total": total, "limit": limit, "offset": offset}

@router.get("/{page_id}", response_model=PageWithBlocks)
def get_page(page_id: int, with_blocks: bool = False, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    page, blocks = page_service.get_page_with_blocks(db, page_id)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")

    response = PageResponse.model_validate(page).model_dump()
    response["blocks"] = [BlockResponse.model_validate(b) for b in blocks] if with_blocks else []
    return response

@router.put("/{page_id}", response_model=PageResponse)
def update_page(page_id: int, page_data: PageUpdate, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    # Maj les champs fournis de la page
    page = _get_page_or_404(db, page_id)
    try:
        return page_service.update_page(db, page, page_data.model_dump(exclude_unset=True), current_user.username)
    except page_service.SlugConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(page_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    page = _get_page_or_404(db, page_id)
    page_service.delete_page(db, page)
