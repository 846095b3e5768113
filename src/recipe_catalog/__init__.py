"""Recipe catalog web service and Edamam ingestion job."""

__version__ = "0.1.0"
