import logging
from fastapi import FastAPI
from sitecms.core.config import settings
from sitecms.core.database import engine, Base
from sitecms.routers import health, auth, pages, blocks, public

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="SiteCMS API",
    version="0.1.0"
)

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(pages.router)
app.include_router(blocks.router)
app.include_router(public.router)
