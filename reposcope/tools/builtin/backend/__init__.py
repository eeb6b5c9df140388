"""Built-in tools for backend repositories."""

from .endpoints import create_get_api_endpoint_tool


def load_tools(repo_path):
    return [create_get_api_endpoint_tool()]
