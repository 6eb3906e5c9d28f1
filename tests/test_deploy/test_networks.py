"""Tests for network presets and settings resolution."""

import pytest

from flashcollateral.chain import ZERO_ADDRESS, derive_address
from flashcollateral.deploy import (
    LOCAL_CHAIN_ID,
    NETWORK_PRESETS,
    load_deployment_settings,
    resolve_network,
)
from flashcollateral.vocabulary import Network


OWNER = derive_address("owner")


class TestResolveNetwork:
    """Tests for name / chain id resolution."""

    def test_by_name(self):
        assert resolve_network("polygon") == Network.POLYGON

    def test_chain_id_wins(self):
        assert resolve_network("mainnet", chain_id=42161) == Network.ARBITRUM

    def test_unknown_name_passes_through(self):
        assert resolve_network("sepolia") == "sepolia"

    def test_default_localhost(self):
        assert resolve_network(None) == Network.LOCALHOST


class TestPresets:
    """Tests for preset networks."""

    @pytest.mark.parametrize("network,chain_id", [
        (Network.MAINNET, 1),
        (Network.ARBITRUM, 42161),
        (Network.POLYGON, 137),
    ])
    def test_preset_chain_ids(self, network, chain_id):
        assert NETWORK_PRESETS[network].chain_id == chain_id

    def test_mainnet_defaults(self):
        settings = load_deployment_settings("mainnet", OWNER, env={})
        preset = NETWORK_PRESETS[Network.MAINNET]

        assert settings.chain_id == 1
        assert settings.pool_address == preset.pool_address
        assert settings.collateral_asset == preset.collateral_asset
        assert settings.borrow_asset == preset.borrow_asset
        assert settings.owner == OWNER
        assert settings.uses_placeholders is False

    def test_env_overrides_preset(self):
        pool = derive_address("custom-pool")
        weth = derive_address("custom-weth")
        settings = load_deployment_settings(
            "arbitrum",
            OWNER,
            env={"AAVE_POOL_ADDRESS_ARBITRUM": pool, "WETH_ADDRESS": weth},
        )

        assert settings.pool_address == pool
        assert settings.collateral_asset == weth
        assert settings.borrow_asset == NETWORK_PRESETS[Network.ARBITRUM].borrow_asset


class TestUnlistedNetworks:
    """Tests for networks without presets."""

    def test_localhost_falls_back_to_zero(self):
        settings = load_deployment_settings("localhost", OWNER, env={})

        assert settings.chain_id == LOCAL_CHAIN_ID
        assert settings.pool_address == ZERO_ADDRESS
        assert settings.uses_placeholders is True

    def test_generic_env_vars(self):
        env = {
            "AAVE_POOL_ADDRESS": derive_address("pool"),
            "FLASH_LOAN_ASSET": derive_address("weth"),
            "BORROW_ASSET": derive_address("usdc"),
        }
        settings = load_deployment_settings("hardhat", OWNER, env=env)

        assert settings.network == "hardhat"
        assert settings.pool_address == env["AAVE_POOL_ADDRESS"]
        assert settings.uses_placeholders is False

    def test_custom_network_keeps_chain_id(self):
        settings = load_deployment_settings("sepolia", OWNER, env={}, chain_id=11155111)
        assert settings.network == "sepolia"
        assert settings.chain_id == 11155111
