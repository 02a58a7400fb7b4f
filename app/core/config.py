from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Doctors Portal"

    # Server
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_FILE: str = "logs/errors.log"
    ALLOWED_ORIGINS: str = "*"

    # Security
    ACCESS_TOKEN_SECRET: str = "dev_secret_key"
    ACCESS_TOKEN_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 1

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    PAYMENT_CURRENCY: str = "usd"

    # Notifications
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_SENDER: str = ""

    CLINIC_NAME: str = "Doctors Portal"
    CLINIC_ADDRESS: str = "Halishahar, Chittagong, Bangladesh"
    CLINIC_CONTACT: str = "01819400400"

    # Seconds allowed for any call to Supabase, Stripe or SMTP
    EXTERNAL_CALL_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
