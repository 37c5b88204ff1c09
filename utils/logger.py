import logging
import json
from config import LOG_DIR, LOG_LEVEL
import os

# Create logs directory
os.makedirs(LOG_DIR, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(f'{LOG_DIR}/trial_balance.log'),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger('trial_balance')

def log_upload(filename: str, company_id: str, period: str, rows: int):
    """Log trial balance upload"""
    logger.info(f"Trial balance uploaded: {filename} ({company_id} / {period}) - {rows} entries")

def log_validation_complete(key: str, summary: dict, errors: int, warnings: int):
    """Log validation completion"""
    logger.info(f"Validation complete: {key} - errors={errors} warnings={warnings} - {json.dumps(summary)}")

def log_error(error: str, context: dict = None):
    """Log errors"""
    context_str = json.dumps(context) if context else ""
    logger.error(f"Error: {error} - Context: {context_str}")
