from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "Salon"
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "sql"
    DATABASE_URL: str = "sqlite:///./salon.db"
    DATABASE_ECHO: bool = False

    CATALOG_PATH: str | None = None
    FIRST_BOOKING_OFFER_ENABLED: bool = True
    FIRST_BOOKING_COUNTS_CANCELLED: bool = True

    AUTO_REPLY_ENABLED: bool = False

    WHATSAPP_VERIFY_TOKEN: str = ""
    WHATSAPP_APP_SECRET: str | None = None
    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_GRAPH_API_VERSION: str = "v20.0"

    MSG91_API_KEY: str | None = None
    MSG91_SEND_ENDPOINT: str = "https://api.msg91.com/api/v5/whatsapp/whatsapp-outbound"


settings = Settings()
