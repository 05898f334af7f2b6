"""Gateway entry point.

Usage:
    python -m akasha_mcp --backend-url http://localhost:8000
"""

from .cli import main

if __name__ == "__main__":
    main()
