from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "JobBoard"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    # Dedup windows for the notification store.
    job_match_dedup_hours: int = 24
    message_notification_merge_minutes: int = 10
    conversation_separator: str = "_"
    message_preview_chars: int = 50
    notification_page_size: int = 50
    upcoming_interview_days: int = 7

    @property
    def db_path(self) -> Path:
        return self.data_dir / "jobboard.sqlite"

    model_config = {"env_prefix": "JOBBOARD_"}


settings = Settings()
