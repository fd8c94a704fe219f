import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Cloudflare R2 Configuration (product image host)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "storefront")
# Public bucket domain (r2.dev subdomain or custom domain) used to build image URLs
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL", "")
PRODUCT_IMAGE_FOLDER = os.getenv("PRODUCT_IMAGE_FOLDER", "Products")

# Frontend base URL for links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Storefront <noreply@storefront.local>")

STORE_NAME = os.getenv("STORE_NAME", "Storefront")
# Currency label printed next to order totals
STORE_CURRENCY = os.getenv("STORE_CURRENCY", "BGN")
