"""
Router utility functions.

Contains helpers shared by router endpoints to keep them clean.
"""

from backend.api.routers.router_utils.error_handling import handle_domain_errors

__all__ = ["handle_domain_errors"]
