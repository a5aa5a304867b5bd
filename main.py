"""
Main entrypoint: lookup table client CLI.

Env: PAYER_PRIVATE_KEY (or PAYER_KEYPAIR_PATH), SOLANA_NETWORK, SOLANA_RPC_URL, etc.

  python main.py demo
"""

import sys

from lookup_client.cli import main

if __name__ == "__main__":
    sys.exit(main())
