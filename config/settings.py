import os
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:5174,http://localhost:5175"


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "quiz_generator"
    gridfs_bucket: str = "uploads"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    llm_timeout_seconds: float = Field(default=60, gt=0)
    frontend_url: Optional[str] = None
    allowed_origins: List[str] = Field(default_factory=list)
    max_upload_mb: int = Field(default=10, ge=1)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("ALLOWED_ORIGINS", DEFAULT_ORIGINS)
        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("MONGO_DB_NAME", "quiz_generator"),
            gridfs_bucket=os.getenv("GRIDFS_BUCKET", "uploads"),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
            frontend_url=os.getenv("FRONTEND_URL") or None,
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def cors_origins(self) -> List[str]:
        origins = list(self.allowed_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins
