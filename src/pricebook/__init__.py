"""Pricebook: barcode price lookup with a shared exchange rate.

Stores product prices in a reference currency and serves them converted
into a secondary currency.
"""

__version__ = "0.1.0"
