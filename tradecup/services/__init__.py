from tradecup.services.leaderboard_service import (
    FailurePolicy,
    LeaderboardService,
    compute_leaderboard,
    compute_standings,
    gather_or_cancel,
)
from tradecup.services.prize_pool_service import (
    PrizePoolCache,
    PrizePoolService,
    compute_prize_pool,
)
from .enrollment_service import EnrollmentService

__all__ = [
    "FailurePolicy",
    "LeaderboardService",
    "compute_leaderboard",
    "compute_standings",
    "gather_or_cancel",
    "PrizePoolCache",
    "PrizePoolService",
    "compute_prize_pool",
    "EnrollmentService",
]
