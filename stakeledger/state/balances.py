"""
Token balances for the in-memory asset ledger.

Implements BalanceTable[Account, AssetId] -> Amount. The staking core never
touches balances directly; it only issues transfer instructions that an asset
ledger (see `stakeledger/integration/collaborators.py`) applies here.
"""

from typing import Dict, Tuple


# Type aliases
Account = str
AssetId = str
Amount = int  # Non-negative integer (arbitrary precision)


class InsufficientBalanceError(ValueError):
    """Raised when a debit would take a balance below zero."""

    def __init__(self, account: Account, asset: AssetId, balance: Amount, requested: Amount):
        self.account = account
        self.asset = asset
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient balance for {account}: {balance} < {requested} ({asset})"
        )


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount.

    Zero balances are not stored.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Account, AssetId], Amount] = {}

    def get(self, account: Account, asset: AssetId) -> Amount:
        """Balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            ValueError: If amount is negative
        """
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError("amount must be an int")
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def credit(self, account: Account, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        self.set(account, asset, self.get(account, asset) + amount)

    def debit(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Subtract amount from (account, asset).

        Raises:
            ValueError: If amount is negative
            InsufficientBalanceError: If the balance is smaller than amount
        """
        if amount < 0:
            raise ValueError(f"Debit must be non-negative: {amount}")
        current = self.get(account, asset)
        if current < amount:
            raise InsufficientBalanceError(account, asset, current, amount)
        self.set(account, asset, current - amount)

    def transfer(self, source: Account, destination: Account, asset: AssetId, amount: Amount) -> None:
        """Move amount between accounts; the debit is checked before anything changes."""
        self.debit(source, asset, amount)
        self.credit(destination, asset, amount)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
