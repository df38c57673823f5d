"""PDF rendering of a customer account statement."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from html import escape
from string import Template

from ledger.core.config import settings
from ledger.schemas.ledger import CustomerLedger, LedgerEntry, LedgerEntryKind

_STATEMENT_TEMPLATE = Template("""\
<!DOCTYPE html>
<html>
<head>
<style>
  body { font-family: Helvetica, Arial, sans-serif; font-size: 11px; color: #333; margin: 36px; }
  h1 { font-size: 20px; text-align: center; margin-bottom: 2px; }
  .shop { text-align: center; margin-bottom: 20px; }
  h2 { font-size: 13px; background: #2c3e50; color: #fff; padding: 4px 8px; }
  .meta td { padding: 2px 8px 2px 0; }
  table.summary { width: 100%; margin-bottom: 16px; }
  table.summary td { padding: 3px 6px; }
  table.summary .label { font-weight: bold; }
  table.ledger { width: 100%; border-collapse: collapse; }
  table.ledger th { text-align: left; background: #dcdcdc; padding: 5px 6px; }
  table.ledger td { padding: 4px 6px; border-bottom: 1px solid #ddd; }
  table.ledger .right { text-align: right; }
  tr.payment td { background: #dcf5dc; }
  tr.return td { background: #ffe6c8; }
  tr.manual td { background: #fff0d2; }
  tr.detail td { font-size: 9px; color: #445; border-bottom: none; padding-left: 24px; }
  .closing { text-align: right; font-size: 13px; font-weight: bold; margin-top: 14px; }
  .footer { text-align: center; font-size: 9px; color: #777; margin-top: 30px; }
</style>
</head>
<body>
<h1>ACCOUNT STATEMENT</h1>
<div class="shop">${shop_name}</div>
<table class="meta">
  <tr><td><strong>Account Holder:</strong></td><td>${customer_name}</td></tr>
  <tr><td><strong>Phone:</strong></td><td>${customer_phone}</td></tr>
  <tr><td><strong>Statement Date:</strong></td><td>${statement_date}</td></tr>
</table>
<h2>ACCOUNT SUMMARY</h2>
<table class="summary">
  <tr><td class="label">Total Bills:</td><td>${total_bills}</td>
      <td class="label">Total Purchases:</td><td>${total_purchases}</td></tr>
  <tr><td class="label">Paid Bills:</td><td>${paid_bills}</td>
      <td class="label">Total Paid:</td><td>${total_paid}</td></tr>
  <tr><td class="label">Unpaid Bills:</td><td>${unpaid_bills}</td>
      <td class="label">Return Credits:</td><td>${total_return_credits}</td></tr>
  <tr><td class="label">Total Returns:</td><td>${total_returns}</td>
      <td class="label">${balance_label}:</td><td>${display_outstanding}</td></tr>
</table>
<h2>TRANSACTION HISTORY</h2>
<table class="ledger">
  <thead>
    <tr>
      <th>Date</th>
      <th>Description</th>
      <th class="right">Amount</th>
      <th class="right">Paid</th>
      <th class="right">Due</th>
      <th class="right">Balance</th>
    </tr>
  </thead>
  <tbody>
    ${ledger_rows}
  </tbody>
</table>
<div class="closing">${closing_label}: ${closing_amount}</div>
<div class="footer">This is a computer-generated statement and does not require a signature.</div>
</body>
</html>
""")

_ENTRY_ROW_TEMPLATE = Template(
    '<tr class="${row_class}"><td>${date}</td><td>${description}</td>'
    '<td class="right">${amount}</td><td class="right">${paid}</td>'
    '<td class="right">${due}</td><td class="right">${balance}</td></tr>'
)

_DETAIL_ROW_TEMPLATE = Template('<tr class="detail ${row_class}"><td colspan="6">${text}</td></tr>')


def _format_money(value: Decimal | None) -> str:
    """Format an amount with the configured currency symbol and two decimals."""
    amount = Decimal("0") if value is None else value
    return f"{settings.CURRENCY_SYMBOL} {amount:,.2f}"


def _format_date(dt: datetime | None) -> str:
    if dt is None:
        return ""
    return dt.strftime("%Y-%m-%d")


def _row_class(entry: LedgerEntry) -> str:
    if entry.kind == LedgerEntryKind.BILL:
        return "manual" if entry.is_manual_balance else "bill"
    return entry.kind.value


def _entry_rows(entry: LedgerEntry) -> list[str]:
    row_class = _row_class(entry)
    if entry.kind == LedgerEntryKind.BILL:
        amount = _format_money(entry.total_amount)
        paid = "-"
        due = _format_money(entry.outstanding) if entry.outstanding > 0 else "CLEAR"
    else:
        amount = "-"
        paid = _format_money(entry.credit)
        due = "-"

    rows = [
        _ENTRY_ROW_TEMPLATE.substitute(
            row_class=row_class,
            date=_format_date(entry.date),
            description=escape(entry.description),
            amount=amount,
            paid=paid,
            due=due,
            balance=_format_money(entry.balance_after),
        )
    ]
    for item in entry.items:
        label = escape(item.description or item.product_id or "Item")
        rows.append(
            _DETAIL_ROW_TEMPLATE.substitute(
                row_class=row_class,
                text=(
                    f"- {label} &nbsp; {item.quantity.normalize():f} x "
                    f"{_format_money(item.rate)} = {_format_money(item.subtotal)}"
                ),
            )
        )
    if entry.notes and entry.kind != LedgerEntryKind.PAYMENT:
        rows.append(
            _DETAIL_ROW_TEMPLATE.substitute(
                row_class=row_class,
                text=f"Note: {escape(entry.notes)}",
            )
        )
    return rows


class StatementPdfService:
    """Service for rendering customer statements."""

    def build_html(
        self,
        statement: CustomerLedger,
        statement_date: datetime | None = None,
    ) -> str:
        """Fill the statement template from a reconciled customer ledger."""
        stats = statement.stats
        ledger_rows = "\n    ".join(
            row for entry in statement.ledger for row in _entry_rows(entry)
        )

        # Newest entry first, so its balance is the closing one.
        closing_balance = statement.ledger[0].balance_after if statement.ledger else Decimal("0")

        return _STATEMENT_TEMPLATE.substitute(
            shop_name=escape(settings.SHOP_NAME),
            customer_name=escape(statement.customer_name or ""),
            customer_phone=escape(statement.customer_phone),
            statement_date=_format_date(statement_date or datetime.now(UTC)),
            total_bills=stats.total_bills,
            paid_bills=stats.paid_bills,
            unpaid_bills=stats.unpaid_bills,
            total_returns=stats.total_returns,
            total_purchases=_format_money(stats.total_purchases),
            total_paid=_format_money(stats.total_paid),
            total_return_credits=_format_money(stats.total_return_credits),
            balance_label="Credit" if stats.has_credit else "Outstanding",
            display_outstanding=_format_money(stats.display_outstanding),
            ledger_rows=ledger_rows,
            closing_label="CREDIT BALANCE" if closing_balance < 0 else "CLOSING BALANCE",
            closing_amount=_format_money(abs(closing_balance)),
        )

    def render(
        self,
        statement: CustomerLedger,
        statement_date: datetime | None = None,
    ) -> bytes:
        """Generate a PDF for a customer statement.

        Args:
            statement: Ledger, stats and due payments for one customer.
            statement_date: Date printed on the statement. Defaults to today.

        Returns:
            Raw PDF bytes.
        """
        html = self.build_html(statement, statement_date)

        import weasyprint

        pdf_bytes: bytes = weasyprint.HTML(string=html).write_pdf()
        return pdf_bytes
