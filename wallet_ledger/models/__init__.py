"""
Data Models Package

This package contains all Pydantic models used in Wallet Ledger.
All data flowing through the system must conform to these schemas.
"""

from wallet_ledger.models.wallet import (
    ALL_WALLETS,
    ALTERNATIVE_INVESTMENTS,
    CASH_FORMS,
    DIGITAL_ASSETS,
    INVESTMENT_FORMS,
    AllWallets,
    PhysicalForm,
    SpecificWallet,
    Wallet,
    WalletFilter,
    WalletType,
)
from wallet_ledger.models.transaction import (
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
    TransactionType,
    TransferTransaction,
    parse_transaction,
)
from wallet_ledger.models.reports import (
    DailySummary,
    DiscrepancyReport,
    IngestionResult,
    LedgerReport,
    PeriodSummary,
    TransactionWithBalances,
    ValidationIssue,
)
from wallet_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Wallet models
    "ALL_WALLETS",
    "ALTERNATIVE_INVESTMENTS",
    "AllWallets",
    "CASH_FORMS",
    "DIGITAL_ASSETS",
    "INVESTMENT_FORMS",
    "PhysicalForm",
    "SpecificWallet",
    "Wallet",
    "WalletFilter",
    "WalletType",
    # Transaction models
    "ExpenseTransaction",
    "IncomeTransaction",
    "Transaction",
    "TransactionType",
    "TransferTransaction",
    "parse_transaction",
    # Result models
    "DailySummary",
    "DiscrepancyReport",
    "IngestionResult",
    "LedgerReport",
    "PeriodSummary",
    "TransactionWithBalances",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
