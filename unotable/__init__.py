"""UNO table: rules engine, computer opponents and local drivers."""

__version__ = "0.1.0"
