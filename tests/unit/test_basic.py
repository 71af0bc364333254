"""Basic tests to verify project setup."""


def test_import_ambari_client():
    """Test that ambari_client package can be imported."""
    import ambari_client

    assert ambari_client.__version__ == "0.1.0"
    assert ambari_client.ClusterStateClient is not None


def test_import_cli():
    """Test that CLI module can be imported."""
    from ambari_client import cli

    assert cli.app is not None


def test_import_models():
    """Test that models module exposes the public types."""
    from ambari_client import models

    assert models.State is not None
    assert models.RequestEnvelope is not None
    assert models.Result is not None
