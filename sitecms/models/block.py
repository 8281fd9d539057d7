from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from sitecms.core.database import Base

class Block(Base):
    __tablename__ = "page_blocks"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)  # "hero", "text", "features", "pricing", ...
    position = Column(Integer, default=0)  # ordre de rendu dans la page
    visible = Column(Boolean, default=True)
    content = Column(JSON, nullable=False, default=dict)
    custom_styles = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    page = relationship("Page", back_populates="blocks")
