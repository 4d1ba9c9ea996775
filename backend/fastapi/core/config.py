from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Car Wash Tracker"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database URL (read from .env file)
    DATABASE_URL: str = ''

    # JWT Authentication settings
    JWT_SECRET_KEY: str = 'default-secret-key-change-in-production'
    JWT_ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Client URL for CORS
    CLIENT_URL: str = 'http://localhost:3000'

    # Business rules
    # Wall-clock timezone used to cut wash jobs into calendar days
    BUSINESS_TIMEZONE: str = 'UTC'
    # Washer credited with engine/radiator/condenser items in every branch
    DESIGNATED_WASHER_NAME: str = 'Idowu'

    # First super admin, created at startup when the users table is empty
    INITIAL_ADMIN_EMAIL: str = ''
    INITIAL_ADMIN_PASSWORD: str = ''
    INITIAL_BRANCH_NAME: str = 'Branch A'
    INITIAL_BRANCH_CODE: str = 'A'

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

    @property
    def DB_URL(self):
        if self.ENV_MODE == "dev":
            return self.DEV_DB_URL
        else:
            if self.DATABASE_URL:
                return self._with_driver(self.DATABASE_URL)
            else:
                return '{}+psycopg://{}:{}@{}:{}/{}'.format(
                    self.DB_ENGINE,
                    self.DB_USERNAME,
                    self.DB_PASS,
                    self.DB_HOST,
                    self.DB_PORT,
                    self.DB_NAME
                )

    @staticmethod
    def _with_driver(url: str) -> str:
        # Hosted Postgres hands out postgres:// or postgresql:// URLs; pin psycopg3
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            URL_split = url.split("://")
            return f"{URL_split[0]}+psycopg://{URL_split[1]}"
        return url

class DevSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'dev'

    # Database settings for development
    @property
    def DEV_DB_URL(self) -> str:
        # Use PostgreSQL in dev mode if DATABASE_URL is provided in .env
        # Otherwise fall back to SQLite
        if self.DATABASE_URL:
            return self._with_driver(self.DATABASE_URL)
        return "sqlite:///./dev.db"

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

class ProdSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'prod'

    # Database settings for production
    DB_ENGINE: str = 'postgresql'
    DB_USERNAME: str = ''
    DB_PASS: str = ''
    DB_HOST: str = ''
    DB_PORT: str = '5432'
    DB_NAME: str = ''

    # Database settings for production
    model_config = SettingsConfigDict(env_file=".env", extra='allow')

def get_settings(env_mode: str = "dev"):
    if env_mode == "dev":
        return DevSettings()
    return ProdSettings()
