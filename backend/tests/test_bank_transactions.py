"""Bank transaction transform and cashflow tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from moneymap.core.errors import TransformError
from moneymap.schemas.bank import TransactionType
from moneymap.services.bank_transactions import transform_bank_transactions
from moneymap.services.cashflow import describe_cashflow, summarize_monthly_cashflow

PAYLOAD = {
    "bankTransactions": [
        {
            "bank": "ACME",
            "txns": [
                ["1500", "Salary", "2024-06-10T10:00:00+05:30", 1, "NEFT", "25000"],
                ["200.50", "Groceries", "2024-06-12T12:00:00+05:30", 2, "UPI", "24799.50"],
                ["10", "Interest reversal", "2024-06-15T09:00:00+05:30", "7", "OTHERS", "24789.50"],
            ],
        },
        {
            "bank": "Beta Bank",
            "txns": [["800", "Rent", "2024-07-02T08:00:00+05:30", "2", "NEFT"]],
        },
    ]
}


def test_rows_are_named_and_ids_synthesised():
    response = transform_bank_transactions(PAYLOAD)

    acme, beta = response.account_transactions
    assert acme.masked_account_number == "ACME"
    first = acme.transactions[0]
    assert first.transaction_id == "ACME-0-0"
    assert first.transaction_type is TransactionType.CREDIT
    assert first.amount.units == "1500"
    assert first.narration == "Salary"
    assert first.mode == "NEFT"
    assert first.running_balance.units == "25000"
    assert acme.transactions[1].transaction_type is TransactionType.DEBIT
    assert acme.transactions[2].transaction_type is TransactionType.OTHER
    assert beta.transactions[0].transaction_id == "Beta Bank-1-0"
    assert beta.transactions[0].running_balance is None


def test_wire_names_are_camel_case():
    dumped = transform_bank_transactions(PAYLOAD).model_dump(by_alias=True)

    txn = dumped["accountTransactions"][0]["transactions"][0]
    assert txn["transactionId"] == "ACME-0-0"
    assert txn["transactionType"] == TransactionType.CREDIT


def test_missing_timestamp_is_a_transform_error():
    payload = {"bankTransactions": [{"bank": "ACME", "txns": [["10", "x", None, 1]]}]}

    with pytest.raises(TransformError):
        transform_bank_transactions(payload)


def test_non_list_accounts_is_a_transform_error():
    with pytest.raises(TransformError) as excinfo:
        transform_bank_transactions({"bankTransactions": {"bank": "ACME"}})

    assert excinfo.value.domain == "bank_transactions"


def test_monthly_cashflow_splits_income_and_spending():
    response = transform_bank_transactions(PAYLOAD)

    months = summarize_monthly_cashflow(response.account_transactions, "Asia/Kolkata")

    assert [item.month for item in months] == ["2024-06", "2024-07"]
    june, july = months
    assert june.income == Decimal("1500.00")
    assert june.spending == Decimal("200.50")
    assert june.savings == Decimal("1299.50")
    assert june.transaction_count == 3
    assert july.income == Decimal("0.00")
    assert july.spending == Decimal("800.00")


def test_month_follows_configured_timezone():
    payload = {"bankTransactions": [{"bank": "ACME", "txns": [["100", "x", "2024-06-30T20:00:00Z", 1]]}]}
    accounts = transform_bank_transactions(payload).account_transactions

    assert summarize_monthly_cashflow(accounts, "Asia/Kolkata")[0].month == "2024-07"
    assert summarize_monthly_cashflow(accounts, "UTC")[0].month == "2024-06"


def test_describe_cashflow_without_transactions():
    assert describe_cashflow([]) == "No bank transactions available."


def test_huge_amount_is_rendered_without_exponent():
    payload = {"bankTransactions": [{"bank": "ACME", "txns": [["1e30", "Windfall", "2024-06-10T10:00:00+05:30", 1]]}]}

    txn = transform_bank_transactions(payload).account_transactions[0].transactions[0]

    assert txn.amount.units == "1" + "0" * 30
