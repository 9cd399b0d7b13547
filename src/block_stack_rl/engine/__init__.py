"""Move search for Block Stack.

- score / ScoringRules: static position evaluation
- minimax: alpha-beta search over hypothetical placements
- get_best_move: difficulty-tuned move selection
"""

from .heuristic import ScoringRules, score
from .minimax import PROFILES, Difficulty, DifficultyProfile, get_best_move, minimax

__all__ = [
    "ScoringRules",
    "score",
    "Difficulty",
    "DifficultyProfile",
    "PROFILES",
    "get_best_move",
    "minimax",
]
