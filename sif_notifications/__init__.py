"""Notification domain engine for the SIF application."""
