from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./cybersafe.db"
    secret_key: str = "cybersafe-secret-key-change-in-production"
    access_token_expire_minutes: int = 24 * 60
    cookie_secure: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"
    # Reject progress updates for module ids outside the catalog instead of creating them.
    strict_modules: bool = False
    progress_max_attempts: int = 3


settings = Settings()


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    print("Database dropped")
    create_db()


def create_db():
    # Import models so their tables are registered on Base.metadata.
    import cybersafe.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    print("Database created")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
