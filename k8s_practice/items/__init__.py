"""Items module - toy data endpoint over the optional database."""

from k8s_practice.items.models import Item
from k8s_practice.items.router import router

__all__ = ["Item", "router"]
