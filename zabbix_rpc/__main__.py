"""Allow running the client with ``python -m zabbix_rpc``."""

from .main import main

if __name__ == "__main__":
    main()
