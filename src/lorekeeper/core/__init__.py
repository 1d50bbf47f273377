# ABOUTME: Domain snapshots and authoring workflows
# ABOUTME: Sits on top of the persistence stores

"""
Core Layer: Domain models and authoring workflows

This layer handles:
- Immutable dialogue line and dialogue group snapshots
- Authoring-tool workflows (add/delete groups, edit elements)

Data Flow: persistence/ stores → Authoring workflows → CLI
"""

from .models import DialogueGroup, DialogueLine

# Import service on-demand to avoid circular imports
# Use: from lorekeeper.core.service import DialogueAuthoringService

__all__ = [
    "DialogueGroup",
    "DialogueLine",
]
