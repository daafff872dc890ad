"""Placeholder test verifying package import."""


def test_import() -> None:
    """Verify top-level package is importable."""
    import schema_tree

    assert schema_tree.__version__ is not None
    assert schema_tree.__version__ == "0.1.0"
