"""Execution module for signing and executing opportunities."""

from gatewayarb.execution.executor import Executor
from gatewayarb.execution.signer import TransactionSigner


__all__ = [
    "Executor",
    "TransactionSigner",
]
