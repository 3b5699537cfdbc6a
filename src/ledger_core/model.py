"""
Pydantic data models for purchase transaction bundles.

This module defines the enumerations, the input shapes validated before
any write, and the correlation result returned once a bundle has been
recorded.
"""

from enum import IntEnum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictInt, StringConstraints
from pydantic_core import PydanticCustomError

# 16-byte identifiers rendered as 32 hex characters, normalised to lowercase
HexId = Annotated[str, StringConstraints(min_length=32, max_length=32, pattern=r"^[0-9a-fA-F]*$", to_lower=True)]
# Opaque token of the caller's open transaction, passed on exactly as received
ScopeToken = Annotated[str, StringConstraints(min_length=32, max_length=32, pattern=r"^[0-9a-fA-F]*$")]
AccountId = Annotated[str, StringConstraints(min_length=32, max_length=32)]
Amount = Annotated[float, Field(strict=True, ge=0, allow_inf_nan=False)]


class PaymentMethod(IntEnum):
    """
    Payment methods accepted for a purchase.

    Attributes
    ----------
    REAL_TIME_SETTLEMENT : int
        Instant bank-to-bank settlement (FedNow). Settles asynchronously,
        so positive payments start out pending.
    CARD : int
        Card payment, complete as soon as it is recorded.
    """

    REAL_TIME_SETTLEMENT = 0
    CARD = 1


def _reject_non_integer(value):
    # bool is an int subclass; numeric strings would otherwise be coerced
    if isinstance(value, bool) or not isinstance(value, int):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return value


Method = Annotated[PaymentMethod, BeforeValidator(_reject_non_integer)]


class PaymentStatus(IntEnum):
    """Status stored on a payment row."""

    COMPLETE = 4
    PENDING = 5


class _Shape(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class PurchaseInput(_Shape):
    """
    Information about a user's purchase.

    Attributes
    ----------
    payer_id : str
        Identifier of the paying user.
    payee_id : str
        Identifier of the user being paid.
    developer_id : str
        Identifier of the developer the interaction belongs to.
    amount : float
        Purchase amount, non-negative.
    interaction_type_id : int
        Kind of interaction being paid for.
    payment_method : PaymentMethod
        How the purchase is paid.
    payer_account_id : str | None
        Payer bank account, only used for real-time settlement.
    payee_account_id : str | None
        Payee bank account, only used for real-time settlement.
    """

    payer_id: HexId
    payee_id: HexId
    developer_id: HexId
    amount: Amount
    interaction_type_id: StrictInt
    payment_method: Method
    payer_account_id: AccountId | None = None
    payee_account_id: AccountId | None = None


class PromotionInput(_Shape):
    """Promotion attached to a purchase, if any."""

    promo_amount: Amount | None = None


class BundleInput(_Shape):
    """Everything needed to record one purchase bundle, validated as a whole."""

    user_purchase_information: PurchaseInput
    promotion_information: PromotionInput = PromotionInput()
    sql_transaction_id: ScopeToken


class InsertPaymentParams(_Shape):
    payer_id: HexId
    payee_id: HexId
    developer_id: HexId
    amount: Amount
    interaction_type_id: StrictInt
    payment_method: Method
    sql_transaction_id: ScopeToken


class InsertSettlementPaymentParams(_Shape):
    payment_id: HexId
    payer_account_id: AccountId
    payee_account_id: AccountId
    sql_transaction_id: ScopeToken


class InsertLedgerEntryParams(_Shape):
    payer_id: HexId
    payee_id: HexId
    developer_id: HexId
    amount: Amount
    interaction_type_id: StrictInt
    sql_transaction_id: ScopeToken


class InsertPromotionLedgerEntryParams(_Shape):
    """The developer funds the promotion, so it is both payer and developer of the entry."""

    developer_id: HexId
    payee_id: HexId
    promo_amount: Amount
    interaction_type_id: StrictInt
    sql_transaction_id: ScopeToken


class InsertTransactionRecordParams(_Shape):
    # Order is significant: primary ledger entry first
    ledger_entries: Annotated[list[HexId], Field(min_length=1)]
    sql_transaction_id: ScopeToken


class ResultCorrelation(BaseModel):
    """
    Identifiers generated while recording a bundle.

    The two optional members are only set when the matching sub-record was
    written. Serialise with ``model_dump(by_alias=True, exclude_none=True)``
    to obtain the camel-case wire names.

    Attributes
    ----------
    primary_payment_id : str
        Identifier of the payment row.
    customer_ledger_entry_id : str
        Identifier of the primary ledger entry.
    purs_transaction_id : str
        Identifier of the transaction record binding the ledger entries.
    primary_fednow_payment_id : str | None
        Identifier of the settlement payment, for real-time settlement only.
    promotion_ledger_entry_id : str | None
        Identifier of the promotion ledger entry, when a promotion applied.
    """

    model_config = ConfigDict(frozen=True)

    primary_payment_id: str = Field(serialization_alias="primaryPaymentID")
    customer_ledger_entry_id: str = Field(serialization_alias="customerLedgerEntryID")
    purs_transaction_id: str = Field(serialization_alias="pursTransactionID")
    primary_fednow_payment_id: str | None = Field(default=None, serialization_alias="primaryFedNowPaymentID")
    promotion_ledger_entry_id: str | None = Field(default=None, serialization_alias="promotionLedgerEntryID")
