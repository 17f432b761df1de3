"""
Presentation and persistence adapters around the calculation engine.

Modules
-------
formatters : plain-text terminal rendering of results, projections and help.
export     : storage-row sentinel conversion + CSV / JSON / Parquet writers.
"""
