"""Pytest configuration for the ORM Learning Toolkit."""


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as running against a real database"
    )
