from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "sheet-insights"
    env: str = "dev"
    log_level: str = "INFO"
    storage_dir: str = "/app/storage"
    max_upload_mb: int = 10
    allowed_extensions: list[str] = [".xlsx", ".xls", ".csv"]
    files_page_size: int = 10
    history_page_size: int = 20
    recent_items: int = 5
    insights_top_values: int = 10
    insights_similarity_threshold: float = 0.8
    insights_outlier_factor: float = 1.5
    insights_completeness_threshold: float = 95.0
    insights_small_sample: int = 30
    insights_large_sample: int = 10000

    class Config:
        env_file = ".env"


class EngineLabels(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = "enhanced-analytics-engine"
    source: str = "internal"
    confidence: str = "high"
    analysis_depth: str = "comprehensive"


settings = Settings()
ENGINE_LABELS = EngineLabels()
