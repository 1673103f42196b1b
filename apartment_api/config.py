import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

PORT = int(os.getenv("PORT", "5050"))

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

# Admin routes answer 503 while this is unset
ADMIN_SECRET = os.getenv("ADMIN_SECRET")

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "listings")

PUBLIC_PAGE_SIZE_DEFAULT = 12
PUBLIC_PAGE_SIZE_MAX = 50
ADMIN_PAGE_SIZE_DEFAULT = 25
ADMIN_PAGE_SIZE_MAX = 100
