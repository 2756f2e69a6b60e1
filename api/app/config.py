"""Application configuration."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestConfig(BaseModel):
    """Immutable configuration handed to the ingestion components."""

    model_config = ConfigDict(frozen=True)

    # Thumbnails are served from here under assets_url_path
    assets_root: str
    assets_url_path: str = "/assets"

    # None means the system temp directory
    staging_dir: Optional[str] = None

    video_storage_provider: Literal["s3", "local"] = "s3"
    s3_bucket: str = ""
    s3_region: str = "us-east-1"
    s3_endpoint_url: Optional[str] = None
    s3_public_base_url: Optional[str] = None
    s3_prefix: str = ""
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    max_thumbnail_bytes: int = 10 << 20
    max_video_bytes: int = 1 << 30
    stage_chunk_bytes: int = 1 << 20

    sniff_thumbnail_content: bool = False


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    postgres_host: str = "postgres"
    postgres_port: int = 5432
    postgres_user: str = "tubely"
    postgres_password: str = "changeme"
    postgres_db: str = "tubely_db"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True
    api_prefix: str = ""
    cors_origins: List[str] = ["*"]

    # Security
    jwt_secret: str = "changeme-use-a-secure-random-key-in-production"
    jwt_issuer: str = "tubely-access"
    jwt_expires_seconds: int = 3600

    # Storage
    assets_root: str = "./assets"
    assets_url_path: str = "/assets"
    staging_dir: Optional[str] = None
    video_storage_provider: Literal["s3", "local"] = "s3"
    s3_bucket: str = "tubely-videos"
    s3_region: str = "us-east-1"
    s3_endpoint_url: Optional[str] = None
    s3_public_base_url: Optional[str] = None
    s3_prefix: str = ""
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Uploads
    max_thumbnail_bytes: int = 10 << 20
    max_video_bytes: int = 1 << 30
    stage_chunk_bytes: int = 1 << 20
    sniff_thumbnail_content: bool = False

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        """Build database URL."""
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    def ingest_config(self) -> IngestConfig:
        """Snapshot the storage and upload settings."""
        return IngestConfig(
            assets_root=self.assets_root,
            assets_url_path=self.assets_url_path,
            staging_dir=self.staging_dir,
            video_storage_provider=self.video_storage_provider,
            s3_bucket=self.s3_bucket,
            s3_region=self.s3_region,
            s3_endpoint_url=self.s3_endpoint_url,
            s3_public_base_url=self.s3_public_base_url,
            s3_prefix=self.s3_prefix,
            aws_access_key_id=self.aws_access_key_id,
            aws_secret_access_key=self.aws_secret_access_key,
            max_thumbnail_bytes=self.max_thumbnail_bytes,
            max_video_bytes=self.max_video_bytes,
            stage_chunk_bytes=self.stage_chunk_bytes,
            sniff_thumbnail_content=self.sniff_thumbnail_content,
        )


settings = Settings()
