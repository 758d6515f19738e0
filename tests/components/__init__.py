"""Component fixtures for the Tessera test suite."""
