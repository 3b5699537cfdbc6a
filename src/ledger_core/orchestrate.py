"""Bundle orchestration module.

This module records one purchase as a bundle of related rows: a payment,
an optional real-time settlement payment, the customer ledger entry, an
optional promotion ledger entry, and the transaction record tying the
ledger entries together. Writes run strictly in sequence because each one
depends on identifiers generated by the previous ones.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .data_validation import validate
from .model import BundleInput, PaymentMethod, PurchaseInput, ResultCorrelation
from .protocol import RecordWriterProtocol

logger = logging.getLogger(__name__)


def requires_settlement_payment(purchase: PurchaseInput) -> bool:
    """Whether a real-time settlement sub-payment must accompany the payment."""
    return (
        purchase.payment_method == PaymentMethod.REAL_TIME_SETTLEMENT
        and purchase.amount > 0
        and purchase.payer_account_id is not None
        and purchase.payee_account_id is not None
    )


def execute_bundle(
    writer: RecordWriterProtocol,
    user_purchase_information: Mapping[str, Any] | PurchaseInput,
    promotion_information: Mapping[str, Any] | None,
    sql_transaction_id: str,
) -> ResultCorrelation:
    """
    Record a purchase as a bundle of payment, ledger and transaction rows.

    The workflow is:
    - Validate purchase, promotion and scope token together
    - Write the payment
    - Write the settlement payment for positive real-time settlement purchases
      carrying both account ids
    - Write the customer ledger entry
    - Write the promotion ledger entry when the promotion amount is positive
    - Write the transaction record over all ledger entries, customer first

    Parameters
    ----------
    writer : RecordWriterProtocol
        Writer issuing the individual inserts.
    user_purchase_information : Mapping[str, Any] | PurchaseInput
        Purchase being recorded.
    promotion_information : Mapping[str, Any] | None
        Promotion applied to the purchase, if any.
    sql_transaction_id : str
        Token of the already-open transaction every write runs in.

    Returns
    -------
    ResultCorrelation
        Identifiers of every row written.

    Raises
    ------
    ValidationError
        If the input is invalid. Nothing has been written in that case.
    Exception
        Whatever the store raised for a failing write, unchanged. Earlier
        writes are left to the caller's transaction to commit or roll back.
    """
    bundle = validate(
        BundleInput,
        {
            "user_purchase_information": user_purchase_information,
            "promotion_information": promotion_information or {},
            "sql_transaction_id": sql_transaction_id,
        },
    )
    purchase = bundle.user_purchase_information
    promo_amount = bundle.promotion_information.promo_amount
    scope = bundle.sql_transaction_id

    logger.info(
        f"Recording bundle in scope {scope}: amount={purchase.amount}, "
        f"method={purchase.payment_method.name}, promo_amount={promo_amount}"
    )

    ledger_entries: list[str] = []
    step = "payment"
    try:
        payment_id = writer.insert_payment(
            {
                "payer_id": purchase.payer_id,
                "payee_id": purchase.payee_id,
                "developer_id": purchase.developer_id,
                "amount": purchase.amount,
                "interaction_type_id": purchase.interaction_type_id,
                "payment_method": purchase.payment_method,
                "sql_transaction_id": scope,
            }
        )
        logger.debug(f"Payment {payment_id} written")

        settlement_payment_id = None
        if requires_settlement_payment(purchase):
            step = "settlement payment"
            settlement_payment_id = writer.insert_settlement_payment(
                {
                    "payment_id": payment_id,
                    "payer_account_id": purchase.payer_account_id,
                    "payee_account_id": purchase.payee_account_id,
                    "sql_transaction_id": scope,
                }
            )
            logger.debug(f"Settlement payment {settlement_payment_id} written for payment {payment_id}")

        step = "ledger entry"
        ledger_id = writer.insert_ledger_entry(
            {
                "payer_id": purchase.payer_id,
                "payee_id": purchase.payee_id,
                "developer_id": purchase.developer_id,
                "amount": purchase.amount,
                "interaction_type_id": purchase.interaction_type_id,
                "sql_transaction_id": scope,
            }
        )
        ledger_entries.append(ledger_id)
        logger.debug(f"Ledger entry {ledger_id} written")

        promotion_ledger_id = None
        if promo_amount is not None and promo_amount > 0:
            step = "promotion ledger entry"
            # The developer funds the promotion
            promotion_ledger_id = writer.insert_promotion_ledger_entry(
                {
                    "developer_id": purchase.developer_id,
                    "payee_id": purchase.payee_id,
                    "promo_amount": promo_amount,
                    "interaction_type_id": purchase.interaction_type_id,
                    "sql_transaction_id": scope,
                }
            )
            ledger_entries.append(promotion_ledger_id)
            logger.debug(f"Promotion ledger entry {promotion_ledger_id} written")

        step = "transaction record"
        transaction_id = writer.insert_transaction_record(
            {"ledger_entries": ledger_entries, "sql_transaction_id": scope}
        )
    except Exception as exc:
        logger.error(f"Bundle in scope {scope} aborted while writing {step}: {exc}")
        raise

    logger.info(f"Bundle recorded: transaction {transaction_id} over {len(ledger_entries)} ledger entries")

    return ResultCorrelation(
        primary_payment_id=payment_id,
        customer_ledger_entry_id=ledger_id,
        purs_transaction_id=transaction_id,
        primary_fednow_payment_id=settlement_payment_id,
        promotion_ledger_entry_id=promotion_ledger_id,
    )
