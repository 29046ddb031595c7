"""Billing domain: entities and services."""
