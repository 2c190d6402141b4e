"""Command-line interface for neutron-deploy."""
