"""Portfolio ledger: transaction-sourced holdings and analytics."""
