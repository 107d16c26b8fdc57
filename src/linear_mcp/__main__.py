"""
Entry point for running linear_mcp as a module.

Allows running the server via:
    python -m linear_mcp
    uv run python -m linear_mcp
"""

from linear_mcp.server import main

if __name__ == "__main__":
    main()
