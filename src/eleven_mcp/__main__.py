"""Allow ``python -m eleven_mcp``."""

from eleven_mcp.server.app import main

main()
