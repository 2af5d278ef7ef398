"""lbstatus: an overview of the commits deployed in Lookback's micro services."""

__version__ = "0.1.0"
