"""Transaction ingestion and validation package."""

from wallet_ledger.validation.ingest import TransactionIngestor, ingest_transactions

__all__ = ["TransactionIngestor", "ingest_transactions"]
