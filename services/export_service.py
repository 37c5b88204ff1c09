"""
Export service for trial balance Excel reports and the blank upload template
"""

import io
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill

TEMPLATE_ROWS = [
    ("Cash and Cash Equivalents", "1000", 50000, 0),
    ("Accounts Receivable", "1100", 25000, 0),
    ("Inventory", "1200", 15000, 0),
    ("Accounts Payable", "2000", 0, 18000),
    ("Credit Card Payable", "2100", 0, 3500),
    ("Revenue", "4000", 0, 154000),
    ("Cost of Goods Sold", "5000", 48000, 0),
    ("Salaries Expense", "6000", 30000, 0),
    ("Rent Expense", "6100", 5000, 0),
    ("Utilities Expense", "6200", 2500, 0),
]

class ExportService:
    """Builds .xlsx workbooks in memory"""

    def build_report(self, result: dict) -> bytes:
        """Workbook with summary, entries, and any errors or warnings"""
        wb = Workbook()
        wb.remove(wb.active)  # Remove default sheet

        self._create_summary_sheet(wb, result)
        self._create_entries_sheet(wb, result)

        if result.get("structuralErrors"):
            self._create_findings_sheet(wb, "Errors", result["structuralErrors"], "C00000")
        if result.get("analyticalWarnings"):
            self._create_findings_sheet(wb, "Warnings", result["analyticalWarnings"], "C65911")

        return self._to_bytes(wb)

    def build_template(self) -> bytes:
        """Sample trial balance in the layout the upload parser expects"""
        wb = Workbook()
        ws = wb.active
        ws.title = "Trial Balance Template"

        headers = ["Account Name", "Account Code", "Debit", "Credit"]
        ws.append(headers)
        self._style_header(ws, len(headers), "366092")

        for row in TEMPLATE_ROWS:
            ws.append(list(row))

        last_row = len(TEMPLATE_ROWS) + 1
        ws.append([])
        ws.append(["TOTALS", "", f"=SUM(C2:C{last_row})", f"=SUM(D2:D{last_row})"])

        for col, width in zip(['A', 'B', 'C', 'D'], [30, 15, 15, 15]):
            ws.column_dimensions[col].width = width

        return self._to_bytes(wb)

    def _create_summary_sheet(self, wb: Workbook, result: dict):
        ws = wb.create_sheet("Summary")
        summary = result.get("summary", {})

        ws['A1'] = "TRIAL BALANCE SUMMARY"
        ws['A1'].font = Font(size=16, bold=True)
        ws.merge_cells('A1:C1')

        rows = [
            ("Company", result.get("companyId", "N/A")),
            ("Period", result.get("period", "N/A")),
            ("Upload Date", result.get("uploadedAt", "")),
            ("", ""),
            ("Total Debits", summary.get("totalDebits", 0)),
            ("Total Credits", summary.get("totalCredits", 0)),
            ("Difference", summary.get("difference", 0)),
            ("Status", "BALANCED" if result.get("isBalanced") else "UNBALANCED"),
            ("Can Close", "YES" if result.get("canClose") else "NO"),
            ("", ""),
            ("Total Accounts", summary.get("totalAccounts", 0)),
            ("Total Revenue", summary.get("totalRevenue", 0)),
            ("Total Expenses", summary.get("totalExpenses", 0)),
        ]

        row = 3
        for label, value in rows:
            if label:
                ws[f'A{row}'] = label
                ws[f'A{row}'].font = Font(bold=True)
                ws[f'B{row}'] = value
                if isinstance(value, float):
                    ws[f'B{row}'].number_format = '#,##0.00'
            row += 1

        for col in ['A', 'B', 'C']:
            ws.column_dimensions[col].width = 22

    def _create_entries_sheet(self, wb: Workbook, result: dict):
        ws = wb.create_sheet("Entries")
        headers = ["Account Name", "Account Code", "Account Type", "Debit", "Credit", "Balance"]
        ws.append(headers)
        self._style_header(ws, len(headers), "366092")

        entries = result.get("entries", [])
        for entry in entries:
            debit = entry.get("debit", 0)
            credit = entry.get("credit", 0)
            ws.append([
                entry.get("accountName", ""),
                entry.get("accountCode", ""),
                entry.get("accountType", ""),
                debit,
                credit,
                debit - credit,
            ])

        for row in range(2, len(entries) + 2):
            for col in (4, 5, 6):
                ws.cell(row=row, column=col).number_format = '#,##0.00'

        self._autosize(ws)

    def _create_findings_sheet(self, wb: Workbook, title: str, findings: list, color: str):
        ws = wb.create_sheet(title)
        headers = ["Type", "Title", "Message", "Account", "Recommendation"]
        ws.append(headers)
        self._style_header(ws, len(headers), color)

        for finding in findings:
            details = finding.get("details") or {}
            ws.append([
                finding.get("type", ""),
                finding.get("title", ""),
                finding.get("message", ""),
                details.get("account", ""),
                finding.get("recommendation", ""),
            ])

        self._autosize(ws)

    def _style_header(self, ws, column_count: int, color: str):
        header_fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True)

        for col_num in range(1, column_count + 1):
            cell = ws.cell(row=1, column=col_num)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal="center", vertical="center")

    def _autosize(self, ws):
        for col in ws.columns:
            column = col[0].column_letter
            max_length = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
            ws.column_dimensions[column].width = min(max_length + 2, 50)

    def _to_bytes(self, wb: Workbook) -> bytes:
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
