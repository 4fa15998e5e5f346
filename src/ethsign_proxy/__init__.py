"""Remote signing proxy answering Ethereum ``eth_sign`` JSON-RPC requests."""

__version__ = "0.1.0"
