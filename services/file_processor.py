"""
Trial balance file parsing.

Reads CSV and Excel exports from accounting tools and maps their rows to
TrialBalanceEntry objects. Column layout varies per export tool, so the
header row and the role of each column are detected from header tokens.
"""

import io
import os
import re
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config import SUPPORTED_EXTENSIONS
from models import TrialBalanceEntry
from utils.helpers import normalize_text, parse_amount
from utils.logger import logger

HEADER_SCAN_ROWS = 10

# Checked in order; a column is assigned to the first role whose tokens it matches.
COLUMN_TOKENS = {
    'debit': ['debit', 'dr'],
    'credit': ['credit', 'cr'],
    'account_type': ['type', 'category', 'class'],
    'account_code': ['code', 'number', 'no', '#'],
    'account_name': ['account name', 'description', 'name', 'account'],
    'balance': ['balance', 'net', 'amount'],
}

class UnsupportedFileError(ValueError):
    """File extension is not a supported trial balance format"""

class TrialBalanceParseError(ValueError):
    """File could not be read as a trial balance"""

def _tokens(header: str) -> List[str]:
    return [t for t in re.split(r'[^a-z0-9#]+', header.lower()) if t]

def _matches(header: str, token: str) -> bool:
    header = header.lower().strip()
    if ' ' in token:
        return token in header
    return token in _tokens(header)

def split_signed(debit: float, credit: float) -> Tuple[float, float]:
    """Move negative amounts to the opposite side so both stay non-negative"""
    return max(debit, 0.0) + max(-credit, 0.0), max(credit, 0.0) + max(-debit, 0.0)

class FileProcessor:
    def __init__(self):
        self.supported_formats = SUPPORTED_EXTENSIONS

    def parse_trial_balance(self, content: bytes, filename: str) -> List[TrialBalanceEntry]:
        """Parse raw upload bytes into trial balance entries"""
        file_ext = os.path.splitext(filename)[1].lower()
        if file_ext not in self.supported_formats:
            raise UnsupportedFileError(
                f"Unsupported file format: {file_ext or filename}. Please upload CSV or Excel file."
            )

        if file_ext == '.csv':
            raw = self.read_csv(content)
        else:
            raw = self.read_excel(content, file_ext)

        entries = self.extract_entries(raw)
        logger.info(f"Parsed {len(entries)} trial balance entries from {filename}")
        return entries

    def read_csv(self, content: bytes) -> pd.DataFrame:
        """Decode and split a delimited text file; no header interpretation"""
        for encoding in ['utf-8', 'latin-1', 'cp1252']:
            try:
                text_content = content.decode(encoding)
                break
            except UnicodeDecodeError:
                continue
        else:
            raise TrialBalanceParseError("Could not decode file with any supported encoding")

        lines = [line for line in text_content.splitlines() if line.strip()]
        if len(lines) < 2:
            raise TrialBalanceParseError("CSV file must have at least a header row and one data row")

        sep = self.detect_separator(lines[:HEADER_SCAN_ROWS])
        if sep is None:
            raise TrialBalanceParseError("Could not parse CSV with any supported separator")

        # Title lines above the header have fewer fields; widen every row to the longest one
        width = max(line.count(sep) for line in lines) + 1
        try:
            return pd.read_csv(io.StringIO('\n'.join(lines)), sep=sep, header=None,
                               names=list(range(width)), dtype=str)
        except pd.errors.ParserError as e:
            raise TrialBalanceParseError(f"Error parsing CSV: {str(e)}") from e

    def detect_separator(self, sample: List[str]) -> Optional[str]:
        """Most frequent candidate separator in the sample lines"""
        counts = {sep: sum(line.count(sep) for line in sample) for sep in [',', ';', '\t', '|']}
        sep, count = max(counts.items(), key=lambda item: item[1])
        return sep if count > 0 else None

    def read_excel(self, content: bytes, file_ext: str) -> pd.DataFrame:
        """Read the first sheet of a workbook without header interpretation"""
        engine = 'openpyxl' if file_ext == '.xlsx' else 'xlrd'
        try:
            return pd.read_excel(io.BytesIO(content), header=None, sheet_name=0, engine=engine)
        except Exception as e:
            raise TrialBalanceParseError(f"Error parsing Excel: {str(e)}") from e

    def detect_columns(self, headers: List[str]) -> Dict[str, int]:
        """Map column roles to positions from a header row"""
        columns: Dict[str, int] = {}
        for position, header in enumerate(headers):
            if not header:
                continue
            for role, tokens in COLUMN_TOKENS.items():
                if role in columns:
                    continue
                if any(_matches(header, token) for token in tokens):
                    columns[role] = position
                    break
        return columns

    def find_header_row(self, df: pd.DataFrame) -> Optional[int]:
        """Index of the first row that looks like a trial balance header"""
        for idx in range(min(HEADER_SCAN_ROWS, len(df))):
            headers = [normalize_text(cell) for cell in df.iloc[idx].tolist()]
            columns = self.detect_columns(headers)
            has_amounts = ('debit' in columns and 'credit' in columns) or 'balance' in columns
            if 'account_name' in columns and has_amounts:
                return idx
        return None

    def extract_entries(self, df: pd.DataFrame) -> List[TrialBalanceEntry]:
        """Turn a headerless frame into entries, dropping rows that do not parse"""
        header_idx = self.find_header_row(df)
        if header_idx is None:
            raise TrialBalanceParseError(
                "Could not detect trial balance columns (expected account name and debit/credit or balance)"
            )
        if header_idx + 1 >= len(df):
            raise TrialBalanceParseError("File must have at least a header row and one data row")

        headers = [normalize_text(cell) for cell in df.iloc[header_idx].tolist()]
        columns = self.detect_columns(headers)
        logger.info(f"Trial balance column mapping detected: {columns}")

        use_debit_credit = 'debit' in columns and 'credit' in columns
        entries = []

        for _, row in df.iloc[header_idx + 1:].iterrows():
            cells = row.tolist()

            def cell(role: str):
                position = columns.get(role)
                if position is None or position >= len(cells):
                    return None
                return cells[position]

            account_name = normalize_text(cell('account_name'))

            if use_debit_credit:
                debit, credit = split_signed(parse_amount(cell('debit')), parse_amount(cell('credit')))
            else:
                balance = parse_amount(cell('balance'))
                debit = balance if balance > 0 else 0.0
                credit = abs(balance) if balance < 0 else 0.0

            # Empty rows, total rows and zero rows are dropped without being reported
            lowered = account_name.lower()
            if not lowered or 'total' in lowered or (debit == 0 and credit == 0):
                continue

            entries.append(TrialBalanceEntry(
                account_code=normalize_text(cell('account_code')),
                account_name=account_name,
                account_type=normalize_text(cell('account_type')),
                debit=debit,
                credit=credit,
            ))

        return entries
