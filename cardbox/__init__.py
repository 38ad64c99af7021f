"""CardBox - sports card collection tracker with spreadsheet bulk import."""

__version__ = "0.1.0"
