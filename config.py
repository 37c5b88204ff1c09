import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./trial_balance.db")

# Directories
LOG_DIR = os.getenv("LOG_DIR", "storage/logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# HTTP
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

# Uploads
SUPPORTED_EXTENSIONS = ['.csv', '.xlsx', '.xls']

# Validation rules. Absolute amounts are in the ledger's own currency units.
TRIAL_BALANCE_RULES = {
    "balance_tolerance": 0.01,
    "suspense_threshold": 1000,
    "cash_variance_percent": 70,
    "expense_variance_percent": 150,
    "expense_variance_amount": 5000,
}

STORAGE_KEY_PREFIX = "trial-balance"
