import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Environment detection
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")  # Default to development

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./visacrm.db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.environ.get("PORT", 8000))

# Optional admin bootstrap on startup
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")

# Leads created within this window count as "new" on the dashboard
NEW_LEAD_WINDOW_DAYS = 7

MIN_PASSWORD_LENGTH = 6


# Set CORS origins based on environment
if ENVIRONMENT == "production":
    # In production, use both Front_URL and Domain_Front_URL
    Front_URL = os.getenv("Front_URL")
    Domain_Front_URL = os.getenv("Domain_Front_URL")
    if not Front_URL or not Domain_Front_URL:
        raise ValueError("Front_URL and Domain_Front_URL must be set in production environment")
    if SECRET_KEY == "change-me-in-production":
        raise ValueError("SECRET_KEY must be set in production environment")
    ALLOWED_ORIGINS = [Front_URL, Domain_Front_URL]
else:
    # In development, use Local_Front_URL
    ALLOWED_ORIGINS = [os.getenv("Local_Front_URL", "http://localhost:5173")]
