"""Record writer module.

This module turns validated bundle inputs into parameterised inserts. Each
write validates its own parameters, generates the new record's identifier,
issues exactly one store call inside the caller's transaction scope and
returns the identifier. Identifiers are bound as raw 16-byte values.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from ledger_core.data_validation import validate
from ledger_core.identifiers import format_timestamp, gen_id, utc_now
from ledger_core.model import (
    InsertLedgerEntryParams,
    InsertPaymentParams,
    InsertPromotionLedgerEntryParams,
    InsertSettlementPaymentParams,
    InsertTransactionRecordParams,
    PaymentMethod,
    PaymentStatus,
)
from ledger_core.protocol import StoreProtocol

logger = logging.getLogger(__name__)

ID_LENGTH = 32

INSERT_PAYMENT_SQL = (
    "INSERT INTO payment (payment_id, payer_id, payee_id, developer_id, payment_amount, "
    "interaction_type_id, payment_method, payment_status, date_paid) "
    "VALUES (:payment_id, :payer_id, :payee_id, :developer_id, :payment_amount, "
    ":interaction_type_id, :payment_method, :payment_status, :date_paid)"
)
INSERT_SETTLEMENT_PAYMENT_SQL = (
    "INSERT INTO settlement_payment (settlement_payment_id, payment_id, payer_account_id, payee_account_id) "
    "VALUES (:settlement_payment_id, :payment_id, :payer_account_id, :payee_account_id)"
)
INSERT_LEDGER_ENTRY_SQL = (
    "INSERT INTO ledger_entry (ledger_id, payer_id, payee_id, developer_id, amount, interaction_type_id) "
    "VALUES (:ledger_id, :payer_id, :payee_id, :developer_id, :amount, :interaction_type_id)"
)
INSERT_TRANSACTION_RECORD_SQL = (
    "INSERT INTO transaction_record (transaction_id, ledger_id) VALUES (:transaction_id, :ledger_id)"
)


def payment_status_for(payment_method: PaymentMethod, amount: float) -> PaymentStatus:
    """
    Derive the status a new payment is recorded with.

    Real-time settlement completes asynchronously, so a positive payment of
    that kind starts out pending. Everything else is complete immediately.
    """
    if payment_method != PaymentMethod.REAL_TIME_SETTLEMENT or amount == 0:
        return PaymentStatus.COMPLETE
    return PaymentStatus.PENDING


def _blob(hex_id: str) -> bytes:
    return bytes.fromhex(hex_id)


class RecordWriter:
    """
    Writer issuing the inserts that make up a purchase bundle.

    Attributes
    ----------
    store : StoreProtocol
        Store executing the statements.
    id_generator : Callable[[int], str]
        Source of new hex identifiers.
    clock : Callable[[], datetime]
        Source of the current time, used for ``date_paid``.

    Notes
    -----
    Store errors and validation errors propagate unchanged. Nothing is
    retried.
    """

    def __init__(
        self,
        store: StoreProtocol,
        id_generator: Callable[[int], str] = gen_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.id_generator = id_generator
        self.clock = clock

    def _new_id(self) -> str:
        return self.id_generator(ID_LENGTH)

    def insert_payment(self, params: Mapping[str, Any]) -> str:
        """
        Insert a payment row.

        Parameters
        ----------
        params : Mapping[str, Any]
            Fields of ``InsertPaymentParams``.

        Returns
        -------
        str
            Generated payment id.

        Notes
        -----
        ``payment_status`` is derived with :func:`payment_status_for`.
        ``date_paid`` is the current UTC time for complete payments and
        NULL for pending ones.
        """
        payment = validate(InsertPaymentParams, params)
        payment_id = self._new_id()
        status = payment_status_for(payment.payment_method, payment.amount)
        date_paid = format_timestamp(self.clock()) if status == PaymentStatus.COMPLETE else None

        self.store.execute_statement(
            payment.sql_transaction_id,
            INSERT_PAYMENT_SQL,
            {
                "payment_id": _blob(payment_id),
                "payer_id": _blob(payment.payer_id),
                "payee_id": _blob(payment.payee_id),
                "developer_id": _blob(payment.developer_id),
                "payment_amount": payment.amount,
                "interaction_type_id": payment.interaction_type_id,
                "payment_method": int(payment.payment_method),
                "payment_status": int(status),
                "date_paid": date_paid,
            },
        )
        logger.info(f"Inserted payment {payment_id} with status {status.name}")
        return payment_id

    def insert_settlement_payment(self, params: Mapping[str, Any]) -> str:
        """Insert the real-time settlement row linking bank accounts to a payment."""
        settlement = validate(InsertSettlementPaymentParams, params)
        settlement_payment_id = self._new_id()

        self.store.execute_statement(
            settlement.sql_transaction_id,
            INSERT_SETTLEMENT_PAYMENT_SQL,
            {
                "settlement_payment_id": _blob(settlement_payment_id),
                "payment_id": _blob(settlement.payment_id),
                "payer_account_id": settlement.payer_account_id,
                "payee_account_id": settlement.payee_account_id,
            },
        )
        logger.info(f"Inserted settlement payment {settlement_payment_id} for payment {settlement.payment_id}")
        return settlement_payment_id

    def insert_ledger_entry(self, params: Mapping[str, Any]) -> str:
        """Insert the customer ledger entry."""
        entry = validate(InsertLedgerEntryParams, params)
        ledger_id = self._new_id()

        self.store.execute_statement(
            entry.sql_transaction_id,
            INSERT_LEDGER_ENTRY_SQL,
            {
                "ledger_id": _blob(ledger_id),
                "payer_id": _blob(entry.payer_id),
                "payee_id": _blob(entry.payee_id),
                "developer_id": _blob(entry.developer_id),
                "amount": entry.amount,
                "interaction_type_id": entry.interaction_type_id,
            },
        )
        logger.info(f"Inserted ledger entry {ledger_id}")
        return ledger_id

    def insert_promotion_ledger_entry(self, params: Mapping[str, Any]) -> str:
        """Insert a ledger entry moving the promotion amount from the developer to the payee."""
        promotion = validate(InsertPromotionLedgerEntryParams, params)
        ledger_id = self._new_id()

        self.store.execute_statement(
            promotion.sql_transaction_id,
            INSERT_LEDGER_ENTRY_SQL,
            {
                "ledger_id": _blob(ledger_id),
                "payer_id": _blob(promotion.developer_id),
                "payee_id": _blob(promotion.payee_id),
                "developer_id": _blob(promotion.developer_id),
                "amount": promotion.promo_amount,
                "interaction_type_id": promotion.interaction_type_id,
            },
        )
        logger.info(f"Inserted promotion ledger entry {ledger_id}")
        return ledger_id

    def insert_transaction_record(self, params: Mapping[str, Any]) -> str:
        """
        Insert the transaction record binding ledger entries together.

        Parameters
        ----------
        params : Mapping[str, Any]
            Fields of ``InsertTransactionRecordParams``.

        Returns
        -------
        str
            Generated transaction id, shared by every row of the batch.

        Notes
        -----
        Issued as a single batch: one parameter set per ledger entry, in the
        order given.
        """
        record = validate(InsertTransactionRecordParams, params)
        transaction_id = self._new_id()
        parameter_sets = [
            {"transaction_id": _blob(transaction_id), "ledger_id": _blob(ledger_id)}
            for ledger_id in record.ledger_entries
        ]

        self.store.execute_batch(record.sql_transaction_id, INSERT_TRANSACTION_RECORD_SQL, parameter_sets)
        logger.info(f"Inserted transaction record {transaction_id} over {len(parameter_sets)} ledger entries")
        return transaction_id
