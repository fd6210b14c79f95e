"""
Wallet transaction signing.

Holds the keypair loaded from a base58 secret and signs the versioned
transactions returned by the swap service.
"""

import base64

import base58
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from gatewayarb.core.errors import ConfigurationError


SECRET_KEY_LENGTH = 64


class TransactionSigner:
    """
    Signs base64 versioned transactions with the wallet keypair.

    The secret never leaves this object.
    """

    __slots__ = ("_keypair",)

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    @classmethod
    def from_base58(cls, secret: str) -> "TransactionSigner":
        """
        Load a signer from a base58-encoded 64-byte secret key.

        Raises:
            ConfigurationError: If the secret is not a valid keypair.
        """
        try:
            secret_bytes = base58.b58decode(secret.strip())
        except ValueError as e:
            raise ConfigurationError(f"Private key is not valid base58: {e}") from e

        if len(secret_bytes) != SECRET_KEY_LENGTH:
            raise ConfigurationError(
                f"Private key must decode to {SECRET_KEY_LENGTH} bytes, got {len(secret_bytes)}"
            )

        try:
            keypair = Keypair.from_bytes(secret_bytes)
        except ValueError as e:
            raise ConfigurationError(f"Private key is not a valid keypair: {e}") from e

        return cls(keypair)

    @property
    def public_key(self) -> str:
        """Wallet address in base58."""
        return str(self._keypair.pubkey())

    def sign(self, transaction: str) -> str:
        """
        Sign a base64 versioned transaction.

        Args:
            transaction: Serialized transaction from the swap service.

        Returns:
            Signed transaction, base64 encoded.
        """
        raw = base64.b64decode(transaction)
        unsigned = VersionedTransaction.from_bytes(raw)
        signed = VersionedTransaction(unsigned.message, [self._keypair])
        return base64.b64encode(bytes(signed)).decode("ascii")
