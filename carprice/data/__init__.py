"""
Data package: the listing schema and CSV loading for the used-car dataset.
"""
