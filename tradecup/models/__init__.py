from .transaction import Transaction, TransactionKind, TransactionStatus
from .holding import Holding
from .participant import (
    Participant,
    Championship,
    ChampionshipStatus,
    EnrollmentRequest,
    EnrollmentResult,
)
from .prize_pool import PrizeDistribution, PrizePoolInfo
from .leaderboard import LeaderboardEntry, LeaderboardResponse, ParticipantError

__all__ = [
    "Transaction",
    "TransactionKind",
    "TransactionStatus",
    "Holding",
    "Participant",
    "Championship",
    "ChampionshipStatus",
    "EnrollmentRequest",
    "EnrollmentResult",
    "PrizeDistribution",
    "PrizePoolInfo",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "ParticipantError",
]
