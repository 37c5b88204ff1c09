from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any
from enum import Enum

class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

class FindingType(str, Enum):
    UNBALANCED_TB = "UNBALANCED_TB"
    UNUSUAL_BALANCE = "UNUSUAL_BALANCE"
    SUSPENSE_BALANCE = "SUSPENSE_BALANCE"
    UNUSUAL_VARIANCE = "UNUSUAL_VARIANCE"
    MISSING_REVENUE = "MISSING_REVENUE"

class AccountType(str, Enum):
    CASH = "cash"
    RECEIVABLES = "receivables"
    PAYABLES = "payables"
    REVENUE = "revenue"
    EXPENSE = "expense"
    CREDIT_CARD = "credit_card"
    SUSPENSE = "suspense"
    OTHER = "other"

class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire"""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

class TrialBalanceEntry(CamelModel):
    account_code: str = Field("", alias="accountCode")
    account_name: str = Field(..., alias="accountName")
    account_type: str = Field("", alias="accountType")
    debit: float = Field(0.0, ge=0)
    credit: float = Field(0.0, ge=0)

    @property
    def net_balance(self) -> float:
        return self.debit - self.credit

class Finding(CamelModel):
    severity: Severity
    type: FindingType
    title: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    recommendation: str = ""

class TrialBalanceSummary(CamelModel):
    total_debits: float = Field(0.0, alias="totalDebits")
    total_credits: float = Field(0.0, alias="totalCredits")
    difference: float = 0.0
    total_accounts: int = Field(0, alias="totalAccounts")
    total_revenue: float = Field(0.0, alias="totalRevenue")
    total_expenses: float = Field(0.0, alias="totalExpenses")

class ValidationResult(CamelModel):
    company_id: Optional[str] = Field(None, alias="companyId")
    period: Optional[str] = None
    uploaded_at: Optional[str] = Field(None, alias="uploadedAt")
    is_balanced: bool = Field(..., alias="isBalanced")
    structural_errors: List[Finding] = Field(default_factory=list, alias="structuralErrors")
    analytical_warnings: List[Finding] = Field(default_factory=list, alias="analyticalWarnings")
    summary: TrialBalanceSummary
    entries: List[TrialBalanceEntry] = Field(default_factory=list)
    can_close: bool = Field(..., alias="canClose")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
