"""RetailHub: stock control backend."""
__version__ = "0.1.0"
