import logging

from aptos_wallet.account import SigningIdentity
from aptos_wallet.client import LedgerClient
from aptos_wallet.config import WalletConfig
from aptos_wallet.faucet import FaucetClient
from aptos_wallet.features.assets.service import AssetDiscoveryService
from aptos_wallet.features.coin_import.service import CoinImportService
from aptos_wallet.features.faucet.service import FaucetService
from aptos_wallet.features.sync.service import (
    AccountSnapshot,
    AccountSynchronizer,
    ViewTab,
)
from aptos_wallet.features.transfer.outcomes import TransferOutcome
from aptos_wallet.features.transfer.service import TO_ADDRESS_FIELD, TransferService
from aptos_wallet.models import TransferRequest
from aptos_wallet.shared.logging import setup_logging
from aptos_wallet.shared.notifications import NotificationCenter
from aptos_wallet.shared.validation import AddressValidator, AmountValidator

logger = logging.getLogger(__name__)

TRANSFER_AMOUNT_FIELD = "transfer_amount"


class Wallet:
    """Entry point that wires the wallet features around one signing identity."""

    def __init__(
        self,
        identity: SigningIdentity,
        config: WalletConfig | None = None,
        ledger: LedgerClient | None = None,
        faucet: FaucetClient | None = None,
        configure_logging: bool = False,
    ):
        if configure_logging:
            setup_logging()
        self.identity = identity
        self.config = config or WalletConfig.from_environment()
        self.ledger = ledger or LedgerClient(self.config)
        self.faucet_client = faucet or FaucetClient(self.config)
        self.notifications = NotificationCenter()

        discovery = AssetDiscoveryService(
            self.ledger, max_concurrency=self.config.discovery_concurrency
        )
        self.synchronizer = AccountSynchronizer(
            self.ledger,
            discovery,
            notifications=self.notifications,
            address=identity.address,
        )
        self.transfers = TransferService(
            self.ledger, self.synchronizer, gas_reserve=self.config.gas_reserve
        )
        self.coin_imports = CoinImportService(self.ledger, self.synchronizer)
        self.faucet = FaucetService(
            self.faucet_client,
            self.ledger,
            self.synchronizer,
            amount=self.config.faucet_amount,
        )
        logger.info("Wallet ready for %s on %s", identity.address, self.config.node_url)

    @property
    def address(self) -> str:
        return self.identity.address

    @property
    def snapshot(self) -> AccountSnapshot:
        return self.synchronizer.snapshot

    async def refresh(self) -> AccountSnapshot:
        return await self.synchronizer.resync(self.address)

    async def switch_tab(self, tab: ViewTab) -> AccountSnapshot:
        return await self.synchronizer.switch_tab(tab)

    async def send(self, to_address: str, amount: str | int) -> TransferOutcome | None:
        """Validate the transfer form and submit it.

        Returns ``None`` without touching the ledger when a form field is
        invalid; the reason is attached to that field on the snapshot.
        """
        address_result = AddressValidator.validate(to_address)
        amount_result = AmountValidator.parse_amount(amount)

        self.synchronizer.set_field_error(
            TO_ADDRESS_FIELD,
            None if address_result.is_valid else address_result.error_message,
        )
        self.synchronizer.set_field_error(
            TRANSFER_AMOUNT_FIELD,
            None if amount_result.is_valid else amount_result.error_message,
        )
        if not (address_result.is_valid and amount_result.is_valid):
            return None

        request = TransferRequest(
            from_account=self.identity,
            to_address=address_result.normalized_value,
            amount=amount_result.normalized_value,
        )
        return await self.transfers.submit_transfer(request)

    async def import_coin(self, coin: str) -> str:
        return await self.coin_imports.register_coin_type(coin, self.identity)

    async def fund_with_faucet(self) -> list[str]:
        return await self.faucet.fund(self.address)
