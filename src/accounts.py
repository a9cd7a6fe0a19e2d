from decimal import Decimal
from typing import Dict, List, Optional

from errors import InsufficientFundsError
from models import ClientAccount


class AccountTable:
    """
    Per-client balances, created lazily on first reference.
    Only the transaction processor mutates accounts, through the apply_* methods.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def accounts(self) -> List[ClientAccount]:
        """Return all accounts ordered by client id."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def apply_deposit(self, client_id: int, amount: Decimal) -> None:
        self.get_or_create(client_id).credit(amount)

    def apply_withdrawal(self, client_id: int, amount: Decimal) -> None:
        account = self.get_or_create(client_id)
        if account.available < amount:
            raise InsufficientFundsError(client_id, account.available, amount)
        account.debit(amount)

    def apply_dispute_hold(self, client_id: int, amount: Decimal) -> None:
        # available may go negative if the disputed funds were already withdrawn
        self.get_or_create(client_id).hold(amount)

    def apply_resolve_release(self, client_id: int, amount: Decimal) -> None:
        self.get_or_create(client_id).release_hold(amount)

    def apply_chargeback(self, client_id: int, amount: Decimal) -> None:
        account = self.get_or_create(client_id)
        account.remove_held(amount)
        account.locked = True
