"""Read-only query selectors over the ledger and fiscal years."""
