"""Minimal contract ABIs for the tokens and pools this package talks to."""

from typing import Any


def _view(name: str, inputs: list[tuple[str, str]], output: str = "uint256") -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": output}],
    }


def _nonpayable(name: str, inputs: list[tuple[str, str]], output: str | None = None) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "nonpayable",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": output}] if output else [],
    }


ERC20_ABI: list[dict[str, Any]] = [
    _view("name", [], "string"),
    _view("symbol", [], "string"),
    _view("decimals", [], "uint8"),
    _view("totalSupply", []),
    _view("balanceOf", [("account", "address")]),
    _view("allowance", [("owner", "address"), ("spender", "address")]),
    _nonpayable("approve", [("spender", "address"), ("amount", "uint256")], "bool"),
    _nonpayable("transfer", [("to", "address"), ("amount", "uint256")], "bool"),
]

# ERC-4626 style vault share: ERC-20 plus share/asset conversion
SHARE_TOKEN_ABI: list[dict[str, Any]] = [
    *ERC20_ABI,
    _view("asset", [], "address"),
    _view("convertToAssets", [("shares", "uint256")]),
    _view("convertToShares", [("assets", "uint256")]),
]

# Pools that reinvest rewards into the staked balance
AUTO_REWARDS_ABI: list[dict[str, Any]] = [
    _view("totalSupply", []),
    _view("balanceOf", [("account", "address")]),
    _view("stakingToken", [], "address"),
    _view("rewardsToken", [], "address"),
    _nonpayable("stake", [("amount", "uint256")]),
    _nonpayable("withdraw", [("amount", "uint256")]),
]

# Pools whose rewards accrue separately and are claimed with getReward
REWARDS_ABI: list[dict[str, Any]] = [
    *AUTO_REWARDS_ABI,
    _view("earned", [("account", "address")]),
    _view("rewardRate", []),
    _view("periodFinish", []),
    _nonpayable("getReward", []),
    _nonpayable("exit", []),
]
