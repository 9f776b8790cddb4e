"""Application layer: ports, ledger store and use cases."""
