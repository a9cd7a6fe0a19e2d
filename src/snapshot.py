from typing import List

from accounts import AccountTable
from models import AccountSnapshot


class SnapshotEmitter:
    """Renders the final account table, one row per client in ascending client id."""

    def __init__(self, accounts: AccountTable):
        self._accounts = accounts

    def emit(self) -> List[AccountSnapshot]:
        return [AccountSnapshot.from_account(account) for account in self._accounts.accounts()]
