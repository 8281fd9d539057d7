from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://sitecms:sitecms@db:5432/sitecms")
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "60"))  # session admin d'1 heure
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  # 1 mois
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
    DEFAULT_PAGE_LIMIT = int(getenv("DEFAULT_PAGE_LIMIT", "50"))

settings = Settings()
