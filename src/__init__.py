"""FHIR $preferred-id service for NamingSystem resources."""

__version__ = "0.1.0"
