"""Pytest fixtures for rule execution, reporting and DataFrame tests."""

import polars as pl
import pytest


@pytest.fixture
def customer_frame() -> pl.DataFrame:
    """Customer rows with one bad email, one bad zip and a duplicated login."""
    return pl.DataFrame(
        {
            "email": ["jane@example.com", "not-an-email", None, "joe@example.org"],
            "zip": ["12345", "123456789", "1234", "54321"],
            "login": ["janedoe", "johndoe", "janedoe", None],
            "age": [34, 0, 111, 72],
        }
    )


@pytest.fixture
def customer_declarations() -> dict:
    return {
        "email": {"format": "email"},
        "zip": {"format": "zipcode"},
        "login": {"format": "username"},
        "age": {"format": "age"},
    }
