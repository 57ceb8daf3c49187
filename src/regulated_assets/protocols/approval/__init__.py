"""
Approval Protocol - SEP-8 approval server client
================================================

Submits transactions to an issuer's approval server and drives the
follow-up action flow when the server asks for more information.

Flow (driven by the caller):
1. post_transaction -> success | revised: done
2.                  -> pending: wait, then resubmit
3.                  -> action_required: post_action, then resubmit on done
4.                  -> rejected: stop
"""

from .protocol import (
    ApprovalClient,
    parse_post_action_response,
    parse_post_transaction_response,
)

__all__ = [
    'ApprovalClient',
    'parse_post_action_response',
    'parse_post_transaction_response',
]
