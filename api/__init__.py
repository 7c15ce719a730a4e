"""HTTP interface for the Coin Chronicle ledger."""
