"""Shipping profile domain: model, ports and services."""
