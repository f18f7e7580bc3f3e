"""
Statutory modules: financial statements (Úč 1-01, Úč 2-01), VAT return and
control report, and the regulator filings built on them.
"""
