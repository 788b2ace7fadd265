"""ERC-20 style token ledger.

Balances and allowances are plain dicts keyed by lowercase addresses. Accounts
with no entry hold zero. The pair engine moves tokens only through
``transfer`` and ``transfer_from``, so the sum of balances always equals
``total_supply``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from simpledex.errors import InsufficientAllowance, InsufficientBalance
from simpledex.models.types import normalize_address
from simpledex.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class LedgerSnapshot:
    """Copy of a ledger's mutable state, used to roll back a failed transaction."""

    balances: dict[str, int]
    allowances: dict[tuple[str, str], int]
    total_supply: int


@dataclass
class TokenLedger:
    """Fungible token with balances and owner-approved spending."""

    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: int = 0
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address, validate=True)

    def balance_of(self, account: str) -> int:
        return self.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set (not add to) the amount ``spender`` may pull from ``owner``."""
        key = (normalize_address(owner), normalize_address(spender))
        self.allowances[key] = S(amount).value
        logger.debug("approval", token=self.symbol, owner=key[0], spender=key[1], amount=amount)

    def mint(self, account: str, amount: int) -> None:
        account = normalize_address(account)
        self.total_supply = (S(self.total_supply) + S(amount)).value
        self.balances[account] = (S(self.balance_of(account)) + S(amount)).value

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance {balance} of {sender} is below {amount}"
            )
        self.balances[sender] = (S(balance) - S(amount)).value
        self.balances[recipient] = (S(self.balance_of(recipient)) + S(amount)).value

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from owner to recipient on the owner's approval.

        The allowance is checked before the balance and decreases by exactly
        ``amount``.

        Raises:
            InsufficientAllowance: If owner approved spender for less than amount
            InsufficientBalance: If owner holds less than amount
        """
        key = (normalize_address(owner), normalize_address(spender))
        approved = self.allowances.get(key, 0)
        if approved < amount:
            raise InsufficientAllowance(
                f"{self.symbol}: allowance {approved} for {key[1]} is below {amount}"
            )
        self.transfer(owner, recipient, amount)
        self.allowances[key] = (S(approved) - S(amount)).value

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(dict(self.balances), dict(self.allowances), self.total_supply)

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self.balances = dict(snapshot.balances)
        self.allowances = dict(snapshot.allowances)
        self.total_supply = snapshot.total_supply
