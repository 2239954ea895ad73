"""Mutual fund and EPF transform tests."""

from __future__ import annotations

import pytest

from moneymap.core.errors import TransformError
from moneymap.schemas.common import DataAvailability
from moneymap.schemas.mutual_funds import MfTransactionType
from moneymap.services.epf import transform_epf_details
from moneymap.services.mf_transactions import mf_transaction_type, transform_mf_transactions

MF_PAYLOAD = {
    "mfTransactions": [
        {
            "schemeName": "Axis Bluechip Fund - Direct Growth",
            "folioId": "F1",
            "isin": "INF846K01DP8",
            "txns": [
                [1, "2024-01-05", 45.5, "100.5", 4572.75],
                [2, "2024-03-05", 50, "10", 500],
                [7, "2024-02-05", 48, "1", 48],
            ],
        }
    ]
}

EPF_PAYLOAD = {
    "uanAccounts": [
        {
            "uan": 100200300400,
            "name": "Asha Rao",
            "dateOfBirth": "1990-01-01",
            "rawDetails": {
                "est_details": [
                    {
                        "member_id": "MHBAN0012345000",
                        "est_name": "Acme Technologies",
                        "pf_balance": {
                            "net_balance": "150000",
                            "employee_share": {"balance": "90000"},
                            "employer_share": {"credit": "60000"},
                        },
                    }
                ]
            },
        }
    ]
}


def test_mf_rows_are_named_and_sorted():
    response = transform_mf_transactions(MF_PAYLOAD)

    assert [txn.date.isoformat() for txn in response.transactions] == ["2024-03-05", "2024-02-05", "2024-01-05"]
    purchase = response.transactions[2]
    assert purchase.type is MfTransactionType.PURCHASE
    assert purchase.scheme_name == "Axis Bluechip Fund - Direct Growth"
    assert purchase.folio_number == "F1"
    assert purchase.units == "100.5"
    assert purchase.amount.units == "4572.75"
    assert purchase.nav.units == "45.5"


def test_unmapped_mf_code_is_recorded_as_sell():
    assert mf_transaction_type(7) is MfTransactionType.SELL
    assert transform_mf_transactions(MF_PAYLOAD).transactions[1].type is MfTransactionType.SELL


def test_mf_transactions_must_be_an_array():
    with pytest.raises(TransformError) as excinfo:
        transform_mf_transactions({"mfTransactions": {}})

    assert "mfTransactions is not an array" in str(excinfo.value)


def test_mf_row_without_units_is_rejected():
    payload = {"mfTransactions": [{"schemeName": "X", "txns": [[1, "2024-01-01", 10, None, 100]]}]}

    with pytest.raises(TransformError):
        transform_mf_transactions(payload)


def test_epf_balances_come_from_first_uan_account():
    profile = transform_epf_details(EPF_PAYLOAD)

    assert profile.uan == "100200300400"
    assert profile.name == "Asha Rao"
    assert profile.date_of_birth.isoformat() == "1990-01-01"
    account = profile.accounts[0]
    assert account.establishment_name == "Acme Technologies"
    assert account.total_balance.units == "150000"
    assert account.employee_share.units == "90000"
    assert account.employer_share.units == "60000"
    assert account.contributions == []
    assert profile.contributions_status is DataAvailability.UNAVAILABLE


def test_epf_contributions_when_supplied():
    payload = {
        "uanAccounts": [
            {
                "rawDetails": {
                    "est_details": [
                        {
                            "member_id": "M1",
                            "est_name": "Acme",
                            "pf_balance": {"net_balance": "1000"},
                            "contributions": [
                                {
                                    "month": "Jan 2024",
                                    "employeeContribution": "1800",
                                    "employerContribution": "550",
                                    "transactionDate": "2024-02-05",
                                }
                            ],
                        }
                    ]
                }
            }
        ]
    }

    profile = transform_epf_details(payload)

    assert profile.uan is None
    assert profile.contributions_status is DataAvailability.AVAILABLE
    contribution = profile.accounts[0].contributions[0]
    assert contribution.employee_contribution.units == "1800"
    assert contribution.employer_contribution.units == "550"


def test_epf_without_accounts_is_a_transform_error():
    with pytest.raises(TransformError):
        transform_epf_details({"uanAccounts": []})


def test_epf_non_object_pf_balance_is_a_transform_error():
    payload = {"uanAccounts": [{"rawDetails": {"est_details": [{"member_id": "M1", "pf_balance": "150000"}]}}]}

    with pytest.raises(TransformError) as excinfo:
        transform_epf_details(payload)

    assert excinfo.value.domain == "epf"
    assert "pf_balance" in str(excinfo.value)
