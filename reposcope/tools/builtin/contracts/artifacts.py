"""Smart-contract artifact lookups (Hardhat, Foundry, Truffle, OpenZeppelin)."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from reposcope.registry.types import ToolContext, ToolDefinition, ToolResult


async def _read_json(path: Path) -> Optional[Any]:
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return json.loads(await f.read())
    except (OSError, ValueError):
        return None


def abi_candidates(repo_path: Path, contract: str) -> List[Path]:
    return [
        repo_path / "artifacts" / "contracts" / f"{contract}.sol" / f"{contract}.json",
        repo_path / "out" / f"{contract}.sol" / f"{contract}.json",
        repo_path / "build" / "contracts" / f"{contract}.json",
    ]


async def get_contract_abi(args: Dict[str, Any], context: ToolContext) -> ToolResult:
    contract = args.get("contractName")
    if not contract:
        return ToolResult.error("contractName is required")

    for path in abi_candidates(Path(context.repo_path), contract):
        artifact = await _read_json(path)
        if isinstance(artifact, dict) and artifact.get("abi"):
            return ToolResult.json({"abi": artifact["abi"]})

    return ToolResult.error(f"ABI not found for contract {contract}")


def _address_from(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    if data.get("address"):
        return data["address"]
    proxies = data.get("proxies") or []
    if proxies and isinstance(proxies[0], dict):
        return proxies[0].get("address")
    # Foundry broadcast files list created contracts under "transactions"
    for tx in data.get("transactions") or []:
        if isinstance(tx, dict) and tx.get("contractAddress"):
            return tx["contractAddress"]
    return None


async def get_contract_address(args: Dict[str, Any], context: ToolContext) -> ToolResult:
    contract = args.get("contractName")
    if not contract:
        return ToolResult.error("contractName is required")
    network = args.get("network")
    repo_path = Path(context.repo_path)

    candidates = [
        repo_path / "deployments" / (network or "localhost") / f"{contract}.json",
        repo_path / "broadcast" / contract / (network or "localhost") / "run-latest.json",
    ]
    for path in candidates:
        address = _address_from(await _read_json(path))
        if address:
            return ToolResult.json({"address": address, "network": network or "localhost"})

    # OpenZeppelin upgrades manifests: .openzeppelin/<network>.json or unknown-<chainid>.json
    oz_dir = repo_path / ".openzeppelin"
    if oz_dir.is_dir():
        pattern = f"{network}.json" if network else "*.json"
        for path in sorted(oz_dir.glob(pattern)):
            address = _address_from(await _read_json(path))
            if address:
                return ToolResult.json({"address": address, "network": network or path.stem})

    suffix = f" on {network}" if network else ""
    return ToolResult.error(f"Address not found for contract {contract}{suffix}")


def create_get_contract_abi_tool() -> ToolDefinition:
    return ToolDefinition(
        name="get_contract_abi",
        description="Get the ABI for a specific contract",
        input_schema={
            "type": "object",
            "properties": {
                "contractName": {
                    "type": "string",
                    "description": "Name of the contract (e.g., MyContract)",
                },
            },
            "required": ["contractName"],
        },
        handler=get_contract_abi,
    )


def create_get_contract_address_tool() -> ToolDefinition:
    return ToolDefinition(
        name="get_contract_address",
        description="Get the deployed address for a contract from deployment artifacts",
        input_schema={
            "type": "object",
            "properties": {
                "contractName": {"type": "string", "description": "Name of the contract"},
                "network": {"type": "string", "description": "Network name (e.g., mainnet, sepolia)"},
            },
            "required": ["contractName"],
        },
        handler=get_contract_address,
    )
