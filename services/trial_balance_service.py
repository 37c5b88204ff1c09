from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models import ValidationResult
from services.file_processor import FileProcessor
from services.kv_store import KVStore
from services.validation_service import ValidationService
from utils.helpers import build_storage_key
from utils.logger import log_upload, log_validation_complete, logger

class TrialBalanceService:
    """Upload pipeline: parse, compare with the previous period, validate, persist"""

    def __init__(self, store: KVStore, file_processor: Optional[FileProcessor] = None,
                 validator: Optional[ValidationService] = None):
        self.store = store
        self.file_processor = file_processor or FileProcessor()
        self.validator = validator or ValidationService()

    def process_upload(self, content: bytes, filename: str, company_id: str, period: str,
                       previous_period: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate an uploaded trial balance and store the result under
        (company_id, period), replacing any earlier result for that key.
        Parse errors propagate and nothing is written.
        """
        logger.info(f"Processing trial balance for company {company_id}, period {period}")
        entries = self.file_processor.parse_trial_balance(content, filename)
        log_upload(filename, company_id, period, len(entries))

        previous = self.load_previous(company_id, previous_period)
        result = self.validator.validate(entries, previous)
        result.company_id = company_id
        result.period = period
        result.uploaded_at = datetime.now(timezone.utc).isoformat()

        payload = result.to_dict()
        key = build_storage_key(company_id, period)
        self.store.set(key, payload)

        log_validation_complete(key, payload["summary"], len(result.structural_errors),
                                len(result.analytical_warnings))
        return payload

    def load_previous(self, company_id: str, previous_period: Optional[str]) -> Optional[ValidationResult]:
        """Previously stored result for variance analysis; read-only"""
        if not previous_period:
            return None
        stored = self.store.get(build_storage_key(company_id, previous_period))
        if stored is None:
            logger.info(f"No previous trial balance for {company_id} / {previous_period}")
            return None
        return ValidationResult.model_validate(stored)

    def get_result(self, company_id: str, period: str) -> Optional[Dict[str, Any]]:
        return self.store.get(build_storage_key(company_id, period))
