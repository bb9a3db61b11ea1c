# import
from .decision import Decision, DecisionFilter
from .liker import Liker, LikersPage, PutDecisionResult

__all__ = ["Decision", "DecisionFilter", "Liker", "LikersPage", "PutDecisionResult"]
