"""Pytest fixtures for core tests."""

import random

import pytest


@pytest.fixture
def rng():
    """Seeded random source for repeatable placement."""
    return random.Random(1234)


@pytest.fixture
def two_documents():
    """Two documents with identical local ids and a cross-document link."""
    from tests.core.graph_test_helpers import make_document

    return [
        make_document(
            "docA",
            nodes=[("1", "Project Plan"), ("2", "Budget")],
            edges=[("1", "2")],
        ),
        make_document(
            "docB",
            nodes=[("1", "See [[project plan]] for details"), ("2", "Notes")],
            edges=[("1", "2")],
        ),
    ]
