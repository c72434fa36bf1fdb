# arb_monitor/pairs.py
"""
Token Registry for Polygon
Default tokens for the monitored pair (WETH quoted in USDC)
"""

from web3 import Web3
from dataclasses import dataclass
from typing import Dict

# =============================================================================
# TOKEN ADDRESSES (Polygon Mainnet - All Checksummed)
# =============================================================================

USDC_LEGACY = Web3.to_checksum_address("0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174")
USDC_NATIVE = Web3.to_checksum_address("0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359")
USDT = Web3.to_checksum_address("0xc2132D05D31c914a87C6611C10748AEb04B58e8F")
WETH = Web3.to_checksum_address("0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619")
WMATIC = Web3.to_checksum_address("0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270")


@dataclass(frozen=True)
class TokenInfo:
    address: str
    symbol: str


TOKENS: Dict[str, TokenInfo] = {
    USDC_LEGACY: TokenInfo(USDC_LEGACY, "USDC"),
    USDC_NATIVE: TokenInfo(USDC_NATIVE, "USDC"),
    USDT: TokenInfo(USDT, "USDT"),
    WETH: TokenInfo(WETH, "WETH"),
    WMATIC: TokenInfo(WMATIC, "WMATIC"),
}

# Monitored pair (base, quote)
DEFAULT_BASE_TOKEN = WETH
DEFAULT_QUOTE_TOKEN = USDC_LEGACY


def get_token_info(address: str) -> TokenInfo:
    """Get token info by address (checksummed or not)"""
    addr = Web3.to_checksum_address(address)
    return TOKENS.get(addr)


def get_symbol(address: str) -> str:
    """Get token symbol, falling back to a shortened address"""
    info = get_token_info(address)
    if info:
        return info.symbol
    addr = Web3.to_checksum_address(address)
    return f"{addr[:6]}...{addr[-4:]}"
