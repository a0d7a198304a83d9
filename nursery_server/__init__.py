"""Nursery administration backend."""
