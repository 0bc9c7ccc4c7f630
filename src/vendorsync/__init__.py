"""Vendor catalog synchronisation."""
