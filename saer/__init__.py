"""SAER finance dashboard backend."""
