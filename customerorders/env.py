import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

FALSE_VALUES = {"0", "false", "no", "off"}


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


@dataclass
class Settings:
    db_path: Path = Path("data/customerorders.db")
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CUSTOMERORDERS_* environment variables."""
        defaults = cls()
        log_to_file = os.getenv("CUSTOMERORDERS_LOG_FILE")
        return cls(
            db_path=Path(os.getenv("CUSTOMERORDERS_DB", str(defaults.db_path))),
            log_level=os.getenv("CUSTOMERORDERS_LOG_LEVEL", defaults.log_level).upper(),
            log_dir=Path(os.getenv("CUSTOMERORDERS_LOG_DIR", str(defaults.log_dir))),
            log_to_file=(
                defaults.log_to_file
                if log_to_file is None
                else log_to_file.strip().lower() not in FALSE_VALUES
            ),
        )
