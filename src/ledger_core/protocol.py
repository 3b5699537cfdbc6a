"""
Collaborator protocols for bundle recording.

This module defines the two seams the orchestrator depends on: the store
that executes parameterised statements inside a transaction scope, and the
record writer that turns validated inputs into those statements.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol


class StoreProtocol(Protocol):
    """
    Protocol defining the relational store used by the record writer.

    Every call names the transaction scope it runs in. The store owns the
    scope; this library never opens, commits, or rolls one back itself.

    Methods
    -------
    execute_statement(scope, sql, parameters) -> Any
        Execute one parameterised statement.
    execute_batch(scope, sql, parameter_sets) -> Any
        Execute one statement template once per parameter set.

    Notes
    -----
    This is a Protocol class (PEP 544) for structural subtyping.
    Errors raised by an implementation propagate to the caller unchanged.
    """

    def execute_statement(self, scope: str, sql: str, parameters: Mapping[str, Any]) -> Any:
        """
        Execute a single statement with named parameters.

        Parameters
        ----------
        scope : str
            Token of the open transaction the statement belongs to.
        sql : str
            Statement template using ``:name`` placeholders.
        parameters : Mapping[str, Any]
            Values bound to the placeholders.
        """
        ...

    def execute_batch(self, scope: str, sql: str, parameter_sets: Sequence[Mapping[str, Any]]) -> Any:
        """
        Execute a statement template once per parameter set, in order.

        Parameters
        ----------
        scope : str
            Token of the open transaction the batch belongs to.
        sql : str
            Statement template using ``:name`` placeholders.
        parameter_sets : Sequence[Mapping[str, Any]]
            One mapping of values per execution.
        """
        ...


class RecordWriterProtocol(Protocol):
    """
    Protocol defining the five record writes making up a bundle.

    Each method validates its own parameters, generates the new record's
    identifier, issues exactly one store call and returns that identifier.
    """

    def insert_payment(self, params: Mapping[str, Any]) -> str: ...

    def insert_settlement_payment(self, params: Mapping[str, Any]) -> str: ...

    def insert_ledger_entry(self, params: Mapping[str, Any]) -> str: ...

    def insert_promotion_ledger_entry(self, params: Mapping[str, Any]) -> str: ...

    def insert_transaction_record(self, params: Mapping[str, Any]) -> str: ...
