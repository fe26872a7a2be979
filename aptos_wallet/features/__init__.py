"""Feature modules for the Aptos wallet core.

- balance: native coin balance extraction
- assets: discovery of the other coins an account holds
- transfer: native coin transfers and their outcome taxonomy
- coin_import: registration of new coin types
- faucet: test-token funding
- sync: the account synchronization loop that owns view state
"""

from aptos_wallet.features import assets
from aptos_wallet.features import balance
from aptos_wallet.features import coin_import
from aptos_wallet.features import faucet
from aptos_wallet.features import sync
from aptos_wallet.features import transfer

__all__ = ["assets", "balance", "coin_import", "faucet", "sync", "transfer"]
