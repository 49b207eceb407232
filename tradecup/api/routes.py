"""API routes for championship leaderboards and prize pools."""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from tradecup.errors import (
    ChampionshipNotFoundError,
    DataSourceError,
    LeaderboardComputationError,
    ProfileNotFoundError,
)
from tradecup.models import (
    EnrollmentRequest,
    EnrollmentResult,
    LeaderboardResponse,
    PrizeDistribution,
    PrizePoolInfo,
)
from tradecup.services import (
    EnrollmentService,
    LeaderboardService,
    PrizePoolService,
    compute_prize_pool,
    gather_or_cancel,
)
from .dependencies import (
    get_enrollment_service,
    get_leaderboard_service,
    get_prize_pool_service,
)

router = APIRouter(prefix="/v1")


async def _leaderboard_with_prizes(
    championship_id: str,
    leaderboard_service: LeaderboardService,
    prize_pool_service: PrizePoolService,
) -> LeaderboardResponse:
    try:
        leaderboard, prize_pool = await gather_or_cancel(
            leaderboard_service.get_leaderboard(championship_id),
            prize_pool_service.get_prize_pool(championship_id),
        )
    except ChampionshipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (LeaderboardComputationError, DataSourceError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    
    leaderboard.prizePool = prize_pool
    return leaderboard


@router.get("/championships/{championshipId}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    championshipId: str = Path(
        ...,
        description="Championship ID",
        examples=["welcome-cup"],
    ),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
    prize_pool_service: PrizePoolService = Depends(get_prize_pool_service),
) -> LeaderboardResponse:
    """
    Get the leaderboard of a championship, ranked by net worth.
    
    Returns: entries (rank, userEmail, userName, totalNetWorth, totalReturn,
    returnPercentage, totalAssetValue, totalTrades), errors, prizePool
    """
    return await _leaderboard_with_prizes(championshipId, leaderboard_service, prize_pool_service)


@router.get("/championships/{championshipId}/prize-pool", response_model=Optional[PrizePoolInfo])
async def get_championship_prize_pool(
    championshipId: str = Path(
        ...,
        description="Championship ID",
        examples=["welcome-cup"],
    ),
    prize_pool_service: PrizePoolService = Depends(get_prize_pool_service),
) -> Optional[PrizePoolInfo]:
    """
    Get the prize pool of a championship.
    
    Returns null for free championships and championships nobody joined.
    """
    try:
        return await prize_pool_service.get_prize_pool(championshipId)
    except ChampionshipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/prize-pool", response_model=Optional[PrizePoolInfo])
async def get_prize_pool(
    participants: int = Query(
        ...,
        description="Number of participants",
        examples=[30],
    ),
    fee: Decimal = Query(
        ...,
        description="Enrollment fee per participant",
        examples=[10],
    ),
) -> Optional[PrizePoolInfo]:
    """
    Preview the prize pool for a participant count and enrollment fee.
    
    Returns: totalEntry, rakePercentage, platformCommission, prizePool, prizeDistribution
    """
    return compute_prize_pool(participants, fee)


@router.post(
    "/championships/{championshipId}/participants",
    response_model=EnrollmentResult,
)
async def join_championship(
    request: EnrollmentRequest,
    championshipId: str = Path(..., description="Championship ID"),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResult:
    """Enroll a user, crediting the championship's starting cash once."""
    try:
        return await enrollment_service.join(championshipId, request.userEmail)
    except ChampionshipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete(
    "/championships/{championshipId}/participants/{userEmail}",
    response_model=EnrollmentResult,
)
async def leave_championship(
    championshipId: str = Path(..., description="Championship ID"),
    userEmail: str = Path(..., description="User email"),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentResult:
    """Remove a user and their holdings and transactions from a championship."""
    try:
        return await enrollment_service.leave(championshipId, userEmail)
    except ChampionshipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post(
    "/championships/{championshipId}/prizes/distribute",
    response_model=Optional[list[PrizeDistribution]],
)
async def distribute_prizes(
    championshipId: str = Path(..., description="Championship ID"),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
    prize_pool_service: PrizePoolService = Depends(get_prize_pool_service),
) -> Optional[list[PrizeDistribution]]:
    """
    Match the current leaderboard to the payout table.
    
    Returns null when there is no prize pool to distribute.
    """
    leaderboard = await _leaderboard_with_prizes(championshipId, leaderboard_service, prize_pool_service)
    try:
        return await prize_pool_service.distribute_prizes(championshipId, leaderboard.entries)
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))
