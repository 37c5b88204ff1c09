"""
Validation Service - trial balance checks run before a period can close.

Structural errors (unbalanced ledger) block closing. Analytical warnings flag
anomalies for review and never block. Domain problems are reported in the
result, never raised.
"""

import re
from typing import Dict, List, Optional

from config import TRIAL_BALANCE_RULES
from models import (
    AccountType, Finding, FindingType, Severity, TrialBalanceEntry,
    TrialBalanceSummary, ValidationResult,
)
from utils.helpers import calculate_percentage

# Priority order matters: names often match several categories.
ACCOUNT_TYPE_KEYWORDS = [
    (AccountType.CASH, ['cash', 'bank']),
    (AccountType.RECEIVABLES, ['receivable', 'ar']),
    (AccountType.PAYABLES, ['payable', 'ap']),
    (AccountType.REVENUE, ['revenue', 'income', 'sales']),
    (AccountType.EXPENSE, ['expense', 'cost']),
    (AccountType.CREDIT_CARD, ['credit card', 'cc payable']),
    (AccountType.SUSPENSE, ['suspense', 'miscellaneous', 'clearing']),
]

# Explicit type labels found in exports, mapped onto the categories above
ACCOUNT_TYPE_ALIASES = {
    'cash': AccountType.CASH,
    'bank': AccountType.CASH,
    'receivable': AccountType.RECEIVABLES,
    'receivables': AccountType.RECEIVABLES,
    'accounts receivable': AccountType.RECEIVABLES,
    'payable': AccountType.PAYABLES,
    'payables': AccountType.PAYABLES,
    'accounts payable': AccountType.PAYABLES,
    'revenue': AccountType.REVENUE,
    'income': AccountType.REVENUE,
    'sales': AccountType.REVENUE,
    'expense': AccountType.EXPENSE,
    'expenses': AccountType.EXPENSE,
    'cost of goods sold': AccountType.EXPENSE,
    'credit card': AccountType.CREDIT_CARD,
    'credit_card': AccountType.CREDIT_CARD,
    'suspense': AccountType.SUSPENSE,
    'other': AccountType.OTHER,
}

def _keyword_in(keyword: str, name: str) -> bool:
    # Two-letter abbreviations only count as whole words ("AR", not "clearing")
    if len(keyword) <= 2:
        return re.search(rf'\b{re.escape(keyword)}\b', name) is not None
    return keyword in name

def infer_account_type(account_name: str) -> str:
    """Classify an account from its name; first matching category wins"""
    name = str(account_name).lower()
    for account_type, keywords in ACCOUNT_TYPE_KEYWORDS:
        if any(_keyword_in(keyword, name) for keyword in keywords):
            return account_type.value
    return AccountType.OTHER.value

def classify_account(entry: TrialBalanceEntry) -> str:
    """Explicit account type when the export has one, otherwise inferred from the name"""
    explicit = (entry.account_type or '').strip().lower()
    if explicit:
        alias = ACCOUNT_TYPE_ALIASES.get(explicit)
        return alias.value if alias else explicit
    return infer_account_type(entry.account_name)

class ValidationService:
    """Runs the structural check and the analytical passes over a trial balance"""

    def __init__(self, rules: Optional[Dict] = None):
        self.rules = {**TRIAL_BALANCE_RULES, **(rules or {})}

    def validate(self, entries: List[TrialBalanceEntry],
                 previous: Optional[ValidationResult] = None) -> ValidationResult:
        types = [classify_account(entry) for entry in entries]
        entries = [entry.model_copy(update={"account_type": t}) for entry, t in zip(entries, types)]

        total_debits = sum(entry.debit for entry in entries)
        total_credits = sum(entry.credit for entry in entries)
        difference = abs(total_debits - total_credits)
        # Rounded so float noise cannot push an exact cent over the tolerance
        is_balanced = round(difference, 10) <= self.rules["balance_tolerance"]

        total_revenue = sum(e.credit - e.debit for e, t in zip(entries, types) if t == AccountType.REVENUE.value)
        total_expenses = sum(e.debit - e.credit for e, t in zip(entries, types) if t == AccountType.EXPENSE.value)

        structural_errors = []
        if not is_balanced:
            structural_errors.append(self._unbalanced_finding(total_debits, total_credits, difference))

        analytical_warnings = []
        analytical_warnings.extend(self._check_unusual_balances(entries, types))
        analytical_warnings.extend(self._check_suspense_balances(entries, types))
        if previous is not None:
            analytical_warnings.extend(self._check_variances(entries, types, previous))
        analytical_warnings.extend(self._check_missing_revenue(total_revenue, total_expenses))

        return ValidationResult(
            is_balanced=is_balanced,
            structural_errors=structural_errors,
            analytical_warnings=analytical_warnings,
            summary=TrialBalanceSummary(
                total_debits=total_debits,
                total_credits=total_credits,
                difference=difference,
                total_accounts=len(entries),
                total_revenue=total_revenue,
                total_expenses=total_expenses,
            ),
            entries=entries,
            can_close=len(structural_errors) == 0,
        )

    def _unbalanced_finding(self, total_debits: float, total_credits: float, difference: float) -> Finding:
        return Finding(
            severity=Severity.ERROR,
            type=FindingType.UNBALANCED_TB,
            title="Trial Balance is not balanced",
            message="Total Debits do not equal Total Credits. Month cannot be closed.",
            details={
                "totalDebits": total_debits,
                "totalCredits": total_credits,
                "difference": difference,
            },
            recommendation=("Review journal entries for posting errors or one-sided entries. "
                            "Check for incomplete or corrupted ledger data."),
        )

    def _check_unusual_balances(self, entries: List[TrialBalanceEntry], types: List[str]) -> List[Finding]:
        """Liability accounts carrying a debit balance"""
        findings = []
        liability_types = (AccountType.PAYABLES.value, AccountType.CREDIT_CARD.value)
        for entry, account_type in zip(entries, types):
            net_balance = entry.net_balance
            if account_type in liability_types and net_balance > 0:
                findings.append(Finding(
                    severity=Severity.WARNING,
                    type=FindingType.UNUSUAL_BALANCE,
                    title="Liability account with debit balance",
                    message=f"{entry.account_name} has a debit balance of {abs(net_balance):.2f}",
                    details={"account": entry.account_name, "balance": net_balance},
                    recommendation=("Verify if this is an overpayment or posting error. "
                                    "Liability accounts typically carry credit balances."),
                ))
        return findings

    def _check_suspense_balances(self, entries: List[TrialBalanceEntry], types: List[str]) -> List[Finding]:
        findings = []
        for entry, account_type in zip(entries, types):
            if account_type != AccountType.SUSPENSE.value:
                continue
            balance = abs(entry.net_balance)
            if balance > self.rules["suspense_threshold"]:
                findings.append(Finding(
                    severity=Severity.WARNING,
                    type=FindingType.SUSPENSE_BALANCE,
                    title="Large balance in suspense account",
                    message=f"{entry.account_name} has a balance of {balance:.2f}",
                    details={"account": entry.account_name, "balance": balance},
                    recommendation=("Suspense and clearing accounts should be zero or near-zero at month-end. "
                                    "Investigate and reclassify transactions."),
                ))
        return findings

    def _check_variances(self, entries: List[TrialBalanceEntry], types: List[str],
                         previous: ValidationResult) -> List[Finding]:
        """Period-over-period movement, matched by exact account name"""
        previous_by_name = {}
        for entry in previous.entries:
            previous_by_name[entry.account_name] = entry

        findings = []
        for entry, account_type in zip(entries, types):
            previous_entry = previous_by_name.get(entry.account_name)
            if previous_entry is None:
                continue

            current_balance = entry.net_balance
            previous_balance = previous_entry.net_balance
            change = current_balance - previous_balance
            percent_change = calculate_percentage(change, abs(previous_balance))
            details = {
                "account": entry.account_name,
                "currentBalance": current_balance,
                "previousBalance": previous_balance,
                "change": change,
                "percentChange": percent_change,
            }

            if account_type == AccountType.CASH.value and abs(percent_change) > self.rules["cash_variance_percent"]:
                findings.append(Finding(
                    severity=Severity.WARNING,
                    type=FindingType.UNUSUAL_VARIANCE,
                    title="Large cash variance",
                    message=f"{entry.account_name} changed by {percent_change:.1f}% vs last month",
                    details=details,
                    recommendation=("Investigate significant cash movements. "
                                    "Verify large payments, receipts, or transfers."),
                ))

            if (account_type == AccountType.EXPENSE.value
                    and abs(percent_change) > self.rules["expense_variance_percent"]
                    and abs(change) > self.rules["expense_variance_amount"]):
                findings.append(Finding(
                    severity=Severity.WARNING,
                    type=FindingType.UNUSUAL_VARIANCE,
                    title="Unusual expense variance",
                    message=f"{entry.account_name} changed by {percent_change:.1f}% vs last month",
                    details=details,
                    recommendation="Review for duplicate entries, missing accruals, or one-time expenses.",
                ))
        return findings

    def _check_missing_revenue(self, total_revenue: float, total_expenses: float) -> List[Finding]:
        if total_revenue == 0 and total_expenses > 0:
            return [Finding(
                severity=Severity.WARNING,
                type=FindingType.MISSING_REVENUE,
                title="No revenue recorded",
                message="Expenses exist but no revenue has been recorded for this period",
                details={"totalExpenses": total_expenses},
                recommendation="Verify if revenue recognition is pending or if this is expected for the period.",
            )]
        return []
