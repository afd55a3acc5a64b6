"""
SplitSave RWF - Mobile Money Transfer Fee Optimiser.

Calculates tiered mobile money transfer fees and recommends how to split a
large transfer into smaller ones so the total fee paid is reduced.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "SplitSave Team"
