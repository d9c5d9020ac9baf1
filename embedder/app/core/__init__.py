"""Service-wide identifiers."""

SERVICE_NAME = "embedder"
VERSION = "0.1.0"
