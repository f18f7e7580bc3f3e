"""Pure domain helpers: clock abstraction and ledger aggregation."""
