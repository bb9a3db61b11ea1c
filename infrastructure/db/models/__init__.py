"""
Database models package.
Import Base from here or from base.py directly.
"""
from infrastructure.db.models.base import Base

# Registering the models on Base must happen after Base is created
from infrastructure.db.models.decisions import DecisionModel

__all__ = ["Base", "DecisionModel"]
