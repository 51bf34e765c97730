"""AlertNAV - live map of the latest reported location per device"""

__version__ = "1.0.0"
