"""
Gatekeep - Verification Package
===============================

Member verification: review cards on join, Accept / Reject decisions.

Structure:
    - tokens.py: custom-id encoding of decision buttons
    - permissions.py: who may decide
    - card.py: review card embed builder
    - views.py: persistent Accept / Reject buttons
    - service.py: VerificationService (posting + decision handling)
"""

from .card import MemberSnapshot, build_review_embed, render_badges
from .permissions import has_verification_permission, required_roles_text
from .service import DecisionState, VerificationService
from .tokens import DecisionAction, DecisionToken, decode_token, encode_token
from .views import DecisionButton, ReviewCardView, setup_verification_views

__all__ = [
    "MemberSnapshot",
    "build_review_embed",
    "render_badges",
    "has_verification_permission",
    "required_roles_text",
    "DecisionState",
    "VerificationService",
    "DecisionAction",
    "DecisionToken",
    "decode_token",
    "encode_token",
    "DecisionButton",
    "ReviewCardView",
    "setup_verification_views",
]
