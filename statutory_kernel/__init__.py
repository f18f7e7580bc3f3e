"""
Statutory kernel: ledger read side, typed errors, structured logging and
the injectable clock shared by the statement and VAT modules.
"""
