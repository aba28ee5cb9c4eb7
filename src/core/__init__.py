"""Configuration, logging, errors and provider clients shared by all services."""
