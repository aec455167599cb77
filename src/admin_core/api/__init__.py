"""HTTP surface for the operational support layer."""

from admin_core.api.app import create_app

__all__ = ["create_app"]
