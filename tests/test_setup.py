"""
Verify project setup is correct.
"""

import teraverse


def test_version_exists():
    """Package has version."""
    assert hasattr(teraverse, "__version__")
    assert teraverse.__version__ == "0.1.0"


def test_public_api_exports():
    """Top-level package exposes the controller factory."""
    assert callable(teraverse.create_controller)
    assert issubclass(teraverse.APITimeoutError, teraverse.APIError)
    assert issubclass(teraverse.APIError, teraverse.TeraverseError)
