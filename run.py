#!/usr/bin/env python3
"""
Bank Ledger API Entry Point

Starts the FastAPI server on the configured host and port
(BANK_LEDGER_API_HOST / BANK_LEDGER_API_PORT, default 127.0.0.1:8090).
"""

import sys

from bank_ledger.api import run_server
from bank_ledger.config import get_config


if __name__ == "__main__":
    settings = get_config()
    print("Starting Bank Ledger API...")
    print(f"API available at: http://{settings.api_host}:{settings.api_port}")
    print(f"Documentation at: http://{settings.api_host}:{settings.api_port}/docs")
    
    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down Bank Ledger API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
