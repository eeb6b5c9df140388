"""Template for a repository tool module.

Copy this file into a repository (or into ``.reposcope/tools/<repo>.py``)
and point the repository's ``tools`` setting at it. A tool module exposes
either:

- ``load_tools(repo_path)``, sync or async, returning a list of
  ToolDefinition; or
- a static ``TOOLS`` list.

Handlers receive the call arguments and a ToolContext (repository path,
RepoInfo and a logger) and may be plain functions or coroutines. They can
return a ToolResult, an MCP-style ``{"content": [...]}`` dict, a string,
or any JSON-serializable value.
"""

from reposcope.registry.types import ToolContext, ToolDefinition, ToolResult


async def example_tool(args, context: ToolContext) -> ToolResult:
    param = args.get("param", "")
    context.logger.info("Example tool called with param: %s", param)

    return ToolResult.json(
        {
            "message": f"Example tool executed in {context.repo.name}",
            "param": param,
            "repoPath": str(context.repo_path),
        }
    )


def load_tools(repo_path):
    return [
        ToolDefinition(
            name="example_tool",
            description="An example tool for this repository",
            input_schema={
                "type": "object",
                "properties": {
                    "param": {"type": "string", "description": "Example parameter"},
                },
                "required": ["param"],
            },
            handler=example_tool,
        )
    ]
