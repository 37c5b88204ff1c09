"""Tests for account classification and trial balance validation."""
import pytest

from services.validation_service import ValidationService, classify_account, infer_account_type
from factories import make_entry


def warning_types(result):
    return [finding.type for finding in result.analytical_warnings]


class TestInferAccountType:
    """Name-based classification follows a fixed priority order."""

    @pytest.mark.parametrize("name,expected", [
        ("Petty Cash", "cash"),
        ("Bank - Checking", "cash"),
        ("Accounts Receivable", "receivables"),
        ("AR - Trade", "receivables"),
        ("Accounts Payable", "payables"),
        ("AP Trade", "payables"),
        ("Sales Revenue", "revenue"),
        ("Interest Income", "revenue"),
        ("Cost of Goods Sold", "expense"),
        ("Rent Expense", "expense"),
        ("Credit Card", "credit_card"),
        ("Suspense", "suspense"),
        ("Miscellaneous", "suspense"),
        ("Inventory", "other"),
        ("Retained Earnings", "other"),
    ])
    def test_single_category_names(self, name, expected):
        assert infer_account_type(name) == expected

    def test_payable_clearing_is_payable(self):
        """Payable is checked before suspense."""
        assert infer_account_type("Accounts Payable Clearing") == "payables"

    def test_accrued_expense_payable_is_payable(self):
        assert infer_account_type("Accrued Expense Payable") == "payables"

    def test_credit_card_payable_is_payable(self):
        assert infer_account_type("Visa Credit Card Payable") == "payables"

    def test_income_tax_expense_is_revenue(self):
        assert infer_account_type("Income Tax Expense") == "revenue"

    def test_abbreviations_need_whole_words(self):
        assert infer_account_type("Owner Capital") == "other"
        assert infer_account_type("Clearing") == "suspense"

    def test_case_insensitive(self):
        assert infer_account_type("CASH ON HAND") == "cash"


class TestClassifyAccount:
    def test_explicit_type_wins(self):
        entry = make_entry("Cash Advance Fees", debit=10, account_type="Expense")
        assert classify_account(entry) == "expense"

    def test_unknown_explicit_type_kept(self):
        entry = make_entry("Cash", debit=10, account_type="Asset")
        assert classify_account(entry) == "asset"

    def test_missing_type_inferred(self):
        assert classify_account(make_entry("Cash", debit=10)) == "cash"


class TestBalanceCheck:
    def setup_method(self):
        self.validator = ValidationService()

    def test_equal_totals_balanced(self):
        result = self.validator.validate([
            make_entry("Cash", debit=1000),
            make_entry("Owner Equity", credit=1000),
        ])
        assert result.is_balanced is True
        assert result.structural_errors == []
        assert result.can_close is True
        assert result.summary.total_debits == 1000
        assert result.summary.total_credits == 1000
        assert result.summary.difference == 0

    def test_unbalanced_emits_single_error(self):
        result = self.validator.validate([
            make_entry("Cash", debit=1000),
            make_entry("Owner Equity", credit=900),
        ])
        assert result.is_balanced is False
        assert result.can_close is False
        assert len(result.structural_errors) == 1
        error = result.structural_errors[0]
        assert error.type == "UNBALANCED_TB"
        assert error.severity == "error"
        assert error.details["totalDebits"] == 1000
        assert error.details["totalCredits"] == 900
        assert error.details["difference"] == 100

    def test_difference_of_one_cent_is_balanced(self):
        result = self.validator.validate([
            make_entry("Cash", debit=100.01),
            make_entry("Owner Equity", credit=100.00),
        ])
        assert result.is_balanced is True
        assert result.can_close is True

    def test_difference_above_one_cent_is_unbalanced(self):
        result = self.validator.validate([
            make_entry("Cash", debit=100.011),
            make_entry("Owner Equity", credit=100.00),
        ])
        assert result.is_balanced is False
        assert [e.type for e in result.structural_errors] == ["UNBALANCED_TB"]

    def test_empty_entries_balanced(self):
        result = self.validator.validate([])
        assert result.is_balanced is True
        assert result.summary.total_accounts == 0
        assert result.analytical_warnings == []

    def test_warnings_do_not_block_closing(self):
        result = self.validator.validate([
            make_entry("Suspense", debit=5000),
            make_entry("Owner Equity", credit=5000),
        ])
        assert warning_types(result) == ["SUSPENSE_BALANCE"]
        assert result.can_close is True


class TestAnalyticalWarnings:
    def setup_method(self):
        self.validator = ValidationService()

    def test_payable_with_debit_balance(self):
        result = self.validator.validate([
            make_entry("Accounts Payable", debit=500),
            make_entry("Cash", credit=500),
        ])
        assert warning_types(result) == ["UNUSUAL_BALANCE"]
        warning = result.analytical_warnings[0]
        assert warning.details == {"account": "Accounts Payable", "balance": 500}
        assert warning.message == "Accounts Payable has a debit balance of 500.00"

    def test_credit_card_with_debit_balance(self):
        result = self.validator.validate([
            make_entry("Credit Card", debit=200),
            make_entry("Cash", credit=200),
        ])
        assert warning_types(result) == ["UNUSUAL_BALANCE"]

    def test_payable_with_credit_balance_is_normal(self):
        result = self.validator.validate([
            make_entry("Accounts Payable", credit=500),
            make_entry("Cash", debit=500),
        ])
        assert result.analytical_warnings == []

    def test_suspense_threshold_is_exclusive(self):
        result = self.validator.validate([
            make_entry("Suspense", debit=1000),
            make_entry("Clearing Account", credit=1000.01),
            make_entry("Cash", debit=0.01),
        ])
        assert warning_types(result) == ["SUSPENSE_BALANCE"]
        assert result.analytical_warnings[0].details["account"] == "Clearing Account"

    def test_missing_revenue(self):
        result = self.validator.validate([
            make_entry("Rent Expense", debit=2000),
            make_entry("Cash", credit=2000),
        ])
        assert warning_types(result) == ["MISSING_REVENUE"]
        assert result.analytical_warnings[0].details == {"totalExpenses": 2000}

    def test_revenue_present_no_warning(self):
        result = self.validator.validate([
            make_entry("Rent Expense", debit=2000),
            make_entry("Sales", credit=2000),
        ])
        assert result.analytical_warnings == []
        assert result.summary.total_revenue == 2000
        assert result.summary.total_expenses == 2000

    def test_warning_order_follows_passes(self):
        previous = self.validator.validate([
            make_entry("Cash", debit=1000),
            make_entry("Owner Equity", credit=1000),
        ])
        result = self.validator.validate([
            make_entry("Cash", debit=3000),
            make_entry("Rent Expense", debit=1000),
            make_entry("Suspense", debit=2000),
            make_entry("Accounts Payable", debit=100),
            make_entry("Owner Equity", credit=6100),
        ], previous)
        assert warning_types(result) == [
            "UNUSUAL_BALANCE",
            "SUSPENSE_BALANCE",
            "UNUSUAL_VARIANCE",
            "MISSING_REVENUE",
        ]


class TestVarianceAnalysis:
    def setup_method(self):
        self.validator = ValidationService()

    def previous_with(self, name, debit):
        return self.validator.validate([
            make_entry(name, debit=debit),
            make_entry("Owner Equity", credit=debit),
        ])

    def variance_warnings(self, result):
        return [w for w in result.analytical_warnings if w.type == "UNUSUAL_VARIANCE"]

    def test_cash_change_above_threshold(self):
        previous = self.previous_with("Cash", 1000)
        result = self.validator.validate([
            make_entry("Cash", debit=1800),
            make_entry("Owner Equity", credit=1800),
        ], previous)
        warnings = self.variance_warnings(result)
        assert len(warnings) == 1
        assert warnings[0].title == "Large cash variance"
        assert warnings[0].details["percentChange"] == pytest.approx(80.0)
        assert warnings[0].details["change"] == pytest.approx(800.0)
        assert warnings[0].details["previousBalance"] == 1000

    def test_cash_change_below_threshold(self):
        previous = self.previous_with("Cash", 1000)
        result = self.validator.validate([
            make_entry("Cash", debit=1690),
            make_entry("Owner Equity", credit=1690),
        ], previous)
        assert self.variance_warnings(result) == []

    def test_expense_needs_percent_and_amount(self):
        previous = self.previous_with("Rent Expense", 3000)
        result = self.validator.validate([
            make_entry("Rent Expense", debit=9000),
            make_entry("Sales", credit=9000),
        ], previous)
        warnings = self.variance_warnings(result)
        assert len(warnings) == 1
        assert warnings[0].title == "Unusual expense variance"
        assert warnings[0].details["change"] == pytest.approx(6000.0)
        assert warnings[0].details["percentChange"] == pytest.approx(200.0)

    def test_expense_percent_alone_not_enough(self):
        previous = self.previous_with("Rent Expense", 1500)
        result = self.validator.validate([
            make_entry("Rent Expense", debit=4500),
            make_entry("Sales", credit=4500),
        ], previous)
        assert self.variance_warnings(result) == []

    def test_match_is_by_exact_name(self):
        previous = self.previous_with("Cash", 1000)
        result = self.validator.validate([
            make_entry("cash", debit=5000),
            make_entry("Owner Equity", credit=5000),
        ], previous)
        assert self.variance_warnings(result) == []

    def test_zero_previous_balance_gives_zero_percent(self):
        previous = self.validator.validate([
            make_entry("Cash", debit=100, credit=100),
        ])
        result = self.validator.validate([
            make_entry("Cash", debit=50000),
            make_entry("Owner Equity", credit=50000),
        ], previous)
        assert self.variance_warnings(result) == []

    def test_custom_rules_override_defaults(self):
        validator = ValidationService({"cash_variance_percent": 50})
        previous = self.previous_with("Cash", 1000)
        result = validator.validate([
            make_entry("Cash", debit=1600),
            make_entry("Owner Equity", credit=1600),
        ], previous)
        assert len(self.variance_warnings(result)) == 1
