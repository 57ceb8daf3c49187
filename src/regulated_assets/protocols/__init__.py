"""
Protocols Package
=================

Wire-level protocol clients.

Modules:
--------
- approval: SEP-8 approval server and action flow
"""

from .approval import ApprovalClient

__all__ = ['ApprovalClient']
