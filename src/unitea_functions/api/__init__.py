"""HTTP API for the UniTea functions."""
