from __future__ import annotations
from dotenv import load_dotenv
load_dotenv()  # Load .env file before importing relay modules

from relay.supervisor import main

if __name__ == "__main__":
    raise SystemExit(main())
