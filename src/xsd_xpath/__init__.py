"""XSD dependency graph and XPath CSV export."""

__version__ = "0.1.0"
