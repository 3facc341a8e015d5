from .base import ThuneeAgent
from .bidding import CallDecisionMaker
from .card_play import CardSelector
from .decisions import Decision, MakeBid, MakeSpecialCall, PassBid, PlayCard
from .random_agent import RandomAgent
from .rule_based import RuleBasedAgent
from .trump import select_best_trump_suit

__all__ = [
    "ThuneeAgent",
    "CallDecisionMaker",
    "CardSelector",
    "Decision",
    "MakeBid",
    "MakeSpecialCall",
    "PassBid",
    "PlayCard",
    "RandomAgent",
    "RuleBasedAgent",
    "select_best_trump_suit",
]
