"""SaaS pricing calculator: input validation, pricing engine and HTTP API."""

__version__ = "0.1.0"
