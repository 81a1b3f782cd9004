"""Core models and schemas for the SHSAT practice toolkit."""
