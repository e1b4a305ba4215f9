import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application configuration from environment variables"""

    # App
    app_name: str = "Event Planner"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    environment: str = os.getenv("ENVIRONMENT", "development")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./event_planner.db")

    # SMS
    sms_enabled: bool = os.getenv("SMS_ENABLED", "False").lower() == "true"
    sms_simulation: bool = os.getenv("SMS_SIMULATION", "False").lower() == "true"

    # Twilio
    twilio_account_sid: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    twilio_auth_token: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    twilio_phone_number: str = os.getenv("TWILIO_PHONE_NUMBER", "")

    # API keys
    reminder_api_key: str = os.getenv("REMINDER_API_KEY", "")
    skip_reminder_auth: bool = os.getenv("SKIP_REMINDER_AUTH", "False").lower() == "true"
    admin_api_key: str = os.getenv("ADMIN_API_KEY", "")

    # Scheduler
    scheduler_enabled: bool = os.getenv("SCHEDULER_ENABLED", "False").lower() == "true"
    reminder_interval_minutes: int = int(os.getenv("REMINDER_INTERVAL_MINUTES", "60"))

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def sms_simulated(self) -> bool:
        """Sends are faked unless running in production with simulation off"""
        return self.sms_simulation or not self.is_production

    @property
    def twilio_configured(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )


settings = Settings()
