#!/usr/bin/env python3
"""Allow ``python -m base_mcp_server``."""

from .cli import main

if __name__ == "__main__":
    main()
