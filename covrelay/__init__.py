"""covrelay - write coverage reports for hosted coverage services and upload them."""

__version__ = "0.1.0"
