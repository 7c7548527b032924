"""Payload models and codecs for the panel API."""
