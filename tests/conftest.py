import pytest
from symbolchain.CryptoTypes import PrivateKey

from aptos_wallet.account import SigningIdentity
from aptos_wallet.features.assets.service import AssetDiscoveryService
from aptos_wallet.features.sync.service import AccountSynchronizer
from aptos_wallet.shared.notifications import NotificationCenter
from tests.factories import FakeLedger


@pytest.fixture
def identity():
    return SigningIdentity(PrivateKey.random())


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
def synchronizer(ledger, notifications, identity):
    return AccountSynchronizer(
        ledger,
        AssetDiscoveryService(ledger),
        notifications=notifications,
        address=identity.address,
    )
