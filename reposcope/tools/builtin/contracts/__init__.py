"""Built-in tools for smart-contract repositories."""

from .artifacts import create_get_contract_abi_tool, create_get_contract_address_tool


def load_tools(repo_path):
    return [
        create_get_contract_abi_tool(),
        create_get_contract_address_tool(),
    ]
