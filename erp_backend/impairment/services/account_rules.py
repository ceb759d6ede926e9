# impairment/services/account_rules.py

"""
ACCOUNT RULES PER CALCULATION TYPE

Each calculation books one debit (expense) and one credit
(contra-asset or asset). The rules below drive the account resolver:
candidate codes first, then name fragments, then provisioning.
"""

from __future__ import annotations

from accounting.models.account import Account
from accounting.services.account_resolver import AccountRule
from impairment.services.previews import CALC_ASSETS, CALC_INVENTORY, CALC_RECEIVABLES

# -------- Receivables (ECL) --------
BAD_DEBT_EXPENSE = AccountRule(
    desired_code="6150",
    desired_name="Bad Debt Expense",
    account_type=Account.EXPENSE,
    candidate_codes=("6150",),
    candidate_names=("bad debt", "doubtful debt", "credit loss"),
)

ALLOWANCE_FOR_DOUBTFUL_ACCOUNTS = AccountRule(
    desired_code="1290",
    desired_name="Allowance for Doubtful Accounts",
    account_type=Account.ASSET,
    normal_balance=Account.CREDIT,
    candidate_codes=("1290",),
    candidate_names=("allowance", "doubtful"),
)

# -------- Fixed assets --------
ASSET_IMPAIRMENT_LOSS = AccountRule(
    desired_code="6160",
    desired_name="Impairment Loss - Assets",
    account_type=Account.EXPENSE,
    candidate_codes=("6160",),
    candidate_names=("impairment loss",),
)

ACCUMULATED_IMPAIRMENT = AccountRule(
    desired_code="1550",
    desired_name="Accumulated Impairment - Assets",
    account_type=Account.ASSET,
    normal_balance=Account.CREDIT,
    candidate_codes=("1550",),
    candidate_names=("accumulated impairment",),
)

# -------- Inventory (NRV) --------
INVENTORY_WRITE_DOWN_EXPENSE = AccountRule(
    desired_code="5110",
    desired_name="Inventory Write-down Expense",
    account_type=Account.EXPENSE,
    candidate_codes=("5110",),
    candidate_names=("write-down", "write down"),
)

INVENTORY = AccountRule(
    desired_code="1300",
    desired_name="Inventory",
    account_type=Account.ASSET,
    candidate_codes=("1300",),
    candidate_names=("inventory", "stock"),
)

# calc_type -> (debit rule, credit rule)
POSTING_RULES: dict[str, tuple[AccountRule, AccountRule]] = {
    CALC_RECEIVABLES: (BAD_DEBT_EXPENSE, ALLOWANCE_FOR_DOUBTFUL_ACCOUNTS),
    CALC_ASSETS: (ASSET_IMPAIRMENT_LOSS, ACCUMULATED_IMPAIRMENT),
    CALC_INVENTORY: (INVENTORY_WRITE_DOWN_EXPENSE, INVENTORY),
}

REFERENCE_PREFIXES = {
    CALC_RECEIVABLES: "IMP-AR",
    CALC_ASSETS: "IMP-AS",
    CALC_INVENTORY: "IMP-INV",
}

DESCRIPTIONS = {
    CALC_RECEIVABLES: "Expected credit loss on receivables",
    CALC_ASSETS: "Impairment of fixed assets",
    CALC_INVENTORY: "Inventory write-down to NRV",
}
