"""Report definition console.

This package contains:
- models: Pydantic report definition and display models
- services: Details controller and report definition rules
- clients: Reporting backend HTTP client
- config: Configuration management
- observability: Structured logging
"""

__version__ = "0.1.0"
