"""Configuration, logging, errors and HTTP plumbing."""
