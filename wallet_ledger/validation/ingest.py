"""
Two-Stage Transaction Ingestion

DESIGN DECISION: Raw records from the persistence layer are turned into
typed transactions ONCE, before any replay. Ingestion happens in two stages:

STAGE 1 - LEGACY NORMALIZATION + STRUCTURAL CHECK:
- camelCase keys from older exports mapped to snake_case
- Case-insensitive transaction type names
- Signed amounts from older records reduced to their magnitude
- Empty transfer endpoints treated as missing
- Unknown transaction types rejected early with a clear message

STAGE 2 - MODEL VALIDATION:
- Pydantic builds the right transaction variant
- A single legacy `wallet_id` becomes a one-element affected-wallet set

IMPORTANT: Ingestion NEVER raises for a bad record. Reconstruction is a
read-time display computation; one corrupt historical record must not take
the whole report down. Bad records are skipped and reported as issues.
Undated records are NOT issues: they are accepted and later excluded by
every temporal query.
"""

from typing import Any, Iterable, Mapping

import structlog
from pydantic import ValidationError

from wallet_ledger.models.reports import IngestionResult, ValidationIssue
from wallet_ledger.models.transaction import TransactionType, parse_transaction


logger = structlog.get_logger(__name__)

_LEGACY_KEYS = {
    "transactionDate": "timestamp",
    "transaction_date": "timestamp",
    "walletId": "wallet_id",
    "affectedWalletIds": "affected_wallet_ids",
    "sourceWalletId": "source_wallet_id",
    "destinationWalletId": "destination_wallet_id",
}

_KNOWN_TYPES = {t.value for t in TransactionType}


class TransactionIngestor:
    """
    Converts raw transaction records into typed transactions.

    Stage 1: Legacy normalization and structural checks
    Stage 2: Model validation
    """

    def _normalize_legacy(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """
        Stage 1a: rewrite a legacy record into the current shape.

        Returns a new dict; the input record is never modified.
        """
        data: dict[str, Any] = {}
        for key, value in record.items():
            data[_LEGACY_KEYS.get(key, key)] = value

        if isinstance(data.get("id"), int) and not isinstance(data["id"], bool):
            data["id"] = str(data["id"])

        raw_type = data.get("type")
        if isinstance(raw_type, TransactionType):
            data["type"] = raw_type.value
        elif isinstance(raw_type, str):
            data["type"] = raw_type.strip().lower()

        amount = data.get("amount")
        if isinstance(amount, str):
            try:
                amount = float(amount)
            except ValueError:
                amount = None
        if isinstance(amount, (int, float)) and not isinstance(amount, bool) and amount < 0:
            data["amount"] = abs(amount)

        for key in ("source_wallet_id", "destination_wallet_id", "wallet_id"):
            if isinstance(data.get(key), str) and not data[key].strip():
                del data[key]

        return data

    def _check_structure(
        self,
        index: int,
        data: Mapping[str, Any],
    ) -> list[ValidationIssue]:
        """
        Stage 1b: checks that make the record unusable before modelling it.
        """
        issues = []
        transaction_id = self._record_id(data)

        raw_type = data.get("type")
        if raw_type is None:
            issues.append(ValidationIssue(
                record_index=index,
                transaction_id=transaction_id,
                field="type",
                issue_type="missing",
                message="Transaction type is missing",
            ))
        elif raw_type not in _KNOWN_TYPES:
            issues.append(ValidationIssue(
                record_index=index,
                transaction_id=transaction_id,
                field="type",
                issue_type="unknown_type",
                message=f"Unknown transaction type: {raw_type!r}",
            ))

        if transaction_id is None:
            issues.append(ValidationIssue(
                record_index=index,
                field="id",
                issue_type="missing",
                message="Transaction id is missing",
            ))

        return issues

    def _validate_model(self, index: int, data: Mapping[str, Any]):
        """
        Stage 2: build the typed transaction.

        Returns: (transaction_or_None, list_of_issues)
        """
        try:
            return parse_transaction(data), []
        except ValidationError as e:
            transaction_id = self._record_id(data)
            issues = [
                ValidationIssue(
                    record_index=index,
                    transaction_id=transaction_id,
                    field=".".join(str(part) for part in error["loc"][1:]) or "record",
                    issue_type=error["type"],
                    message=error["msg"],
                )
                for error in e.errors()
            ]
            return None, issues

    @staticmethod
    def _record_id(data: Mapping[str, Any]):
        transaction_id = data.get("id")
        if transaction_id is None or str(transaction_id).strip() == "":
            return None
        return str(transaction_id)

    def ingest(self, records: Iterable[Mapping[str, Any]]) -> IngestionResult:
        """
        Run both stages over every record.

        Args:
            records: Raw transaction mappings, in storage order

        Returns:
            IngestionResult with accepted transactions (input order kept)
            and the issues of every skipped record
        """
        transactions = []
        all_issues = []
        skipped = 0

        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                skipped += 1
                all_issues.append(ValidationIssue(
                    record_index=index,
                    field="record",
                    issue_type="invalid_record",
                    message=f"Expected a mapping, got {type(record).__name__}",
                ))
                continue

            data = self._normalize_legacy(record)

            issues = self._check_structure(index, data)
            if not issues:
                transaction, issues = self._validate_model(index, data)
                if transaction is not None:
                    transactions.append(transaction)
                    continue

            skipped += 1
            all_issues.extend(issues)
            logger.debug(
                "transaction_record_skipped",
                record_index=index,
                transaction_id=self._record_id(data),
                issue_count=len(issues),
            )

        return IngestionResult(
            transactions=transactions,
            issues=all_issues,
            skipped_count=skipped,
        )

    def get_summary(self, result: IngestionResult) -> str:
        """
        Short human-readable summary of an ingestion run.
        """
        if not result.has_skipped:
            return f"All {result.accepted_count} transactions loaded."

        lines = [
            f"{result.accepted_count} transactions loaded, "
            f"{result.skipped_count} skipped:"
        ]
        for issue in result.issues:
            label = issue.transaction_id or f"record #{issue.record_index}"
            lines.append(f"   • {label}: {issue.field}: {issue.message}")
        return "\n".join(lines)


def ingest_transactions(records: Iterable[Mapping[str, Any]]) -> IngestionResult:
    """Convenience wrapper around TransactionIngestor().ingest()."""
    return TransactionIngestor().ingest(records)
