"""
Boundary layer for external system integrations.

Handles all interactions with external systems (relational store, model
providers, content sources). Provides adapters for infrastructure dependencies.
"""
