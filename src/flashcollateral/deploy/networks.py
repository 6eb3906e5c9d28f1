"""
Network Presets — Known lending pool and asset addresses per network.

Environment variables override every preset; networks without a preset
read generic variables and fall back to the null address.
"""

import os
from dataclasses import dataclass
from typing import Mapping

from pydantic import BaseModel, Field

from flashcollateral.chain.address import ZERO_ADDRESS, is_null_address
from flashcollateral.observability import get_logger
from flashcollateral.vocabulary import Network


logger = get_logger("deploy.networks")


@dataclass(frozen=True)
class NetworkPreset:
    """Default addresses for one network."""
    network: Network
    chain_id: int
    pool_address: str
    collateral_asset: str   # WETH
    borrow_asset: str       # USDC
    pool_env_var: str


NETWORK_PRESETS: dict[Network, NetworkPreset] = {
    Network.MAINNET: NetworkPreset(
        network=Network.MAINNET,
        chain_id=1,
        pool_address="0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
        collateral_asset="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        borrow_asset="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        pool_env_var="AAVE_POOL_ADDRESS_MAINNET",
    ),
    Network.ARBITRUM: NetworkPreset(
        network=Network.ARBITRUM,
        chain_id=42161,
        pool_address="0x794a61358D6845594F94dc1DB02A252b5b4814aD",
        collateral_asset="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        borrow_asset="0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
        pool_env_var="AAVE_POOL_ADDRESS_ARBITRUM",
    ),
    Network.POLYGON: NetworkPreset(
        network=Network.POLYGON,
        chain_id=137,
        pool_address="0x794a61358D6845594F94dc1DB02A252b5b4814aD",
        collateral_asset="0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
        borrow_asset="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
        pool_env_var="AAVE_POOL_ADDRESS_POLYGON",
    ),
}

CHAIN_IDS: dict[int, Network] = {preset.chain_id: net for net, preset in NETWORK_PRESETS.items()}

# Local development chains
LOCAL_CHAIN_ID = 31337


class DeploymentSettings(BaseModel):
    """
    Resolved addresses for deploying a strategy.

    Addresses are left as given; ``StrategyConfig`` rejects null or
    malformed values when the strategy is built.
    """
    network: str = Field(..., description="Network name")
    chain_id: int = Field(..., description="EIP-155 chain id")
    pool_address: str = Field(..., description="Lending pool")
    collateral_asset: str = Field(..., description="Flash-borrowed collateral asset")
    borrow_asset: str = Field(..., description="Asset borrowed against collateral")
    owner: str = Field(..., description="Owning principal")

    @property
    def uses_placeholders(self) -> bool:
        return any(
            is_null_address(a)
            for a in (self.pool_address, self.collateral_asset, self.borrow_asset)
        )


def resolve_network(network: str | Network | None = None, chain_id: int | None = None) -> Network | str:
    """Map a name or chain id onto a known network; unknown names pass through."""
    if chain_id is not None and chain_id in CHAIN_IDS:
        return CHAIN_IDS[chain_id]
    if isinstance(network, Network):
        return network
    try:
        return Network(network)
    except ValueError:
        return network or Network.LOCALHOST


def load_deployment_settings(
    network: str | Network,
    owner: str,
    env: Mapping[str, str] | None = None,
    chain_id: int | None = None,
) -> DeploymentSettings:
    """
    Resolve deployment addresses for ``network``.

    Args:
        network: Network name (mainnet, arbitrum, polygon, localhost, ...)
        owner: Owner address for the new strategy
        env: Environment mapping (default: os.environ)
        chain_id: Chain id, which takes precedence over the name when known

    Returns:
        DeploymentSettings
    """
    env = os.environ if env is None else env
    resolved = resolve_network(network, chain_id)
    preset = NETWORK_PRESETS.get(resolved) if isinstance(resolved, Network) else None

    if preset is not None:
        settings = DeploymentSettings(
            network=preset.network.value,
            chain_id=preset.chain_id,
            pool_address=env.get(preset.pool_env_var) or preset.pool_address,
            collateral_asset=env.get("WETH_ADDRESS") or preset.collateral_asset,
            borrow_asset=env.get("USDC_ADDRESS") or preset.borrow_asset,
            owner=owner,
        )
    else:
        name = resolved.value if isinstance(resolved, Network) else str(resolved)
        settings = DeploymentSettings(
            network=name,
            chain_id=chain_id if chain_id is not None else LOCAL_CHAIN_ID,
            pool_address=env.get("AAVE_POOL_ADDRESS") or ZERO_ADDRESS,
            collateral_asset=env.get("FLASH_LOAN_ASSET") or ZERO_ADDRESS,
            borrow_asset=env.get("BORROW_ASSET") or ZERO_ADDRESS,
            owner=owner,
        )

    if settings.uses_placeholders:
        logger.warning(
            f"Using zero addresses for {settings.network}; set AAVE_POOL_ADDRESS, "
            f"FLASH_LOAN_ASSET and BORROW_ASSET"
        )
    return settings
