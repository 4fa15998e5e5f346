"""Configuration, logging and key helpers shared across the proxy."""
