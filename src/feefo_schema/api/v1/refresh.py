from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Security, status

from feefo_schema.api.dependencies import get_container, get_refresh_service, get_scheduler
from feefo_schema.core.container import Container
from feefo_schema.core.rate_limit import limiter
from feefo_schema.core.security import get_operator
from feefo_schema.domain.models import RefreshOutcome, SchedulerStatus
from feefo_schema.services.refresh_scheduler import RefreshScheduler
from feefo_schema.services.refresh_service import RefreshService

router = APIRouter(prefix="/refresh", tags=["Refresh"])

OperatorDep = Annotated[str, Security(get_operator)]
ContainerDep = Annotated[Container, Depends(get_container)]
SchedulerDep = Annotated[RefreshScheduler, Depends(get_scheduler)]
RefreshServiceDep = Annotated[RefreshService, Depends(get_refresh_service)]


@router.post("", response_model=list[RefreshOutcome])
@limiter.limit("10/minute")
async def trigger_refresh(
    request: Request,
    operator: OperatorDep,
    container: ContainerDep,
    scheduler: SchedulerDep,
    service: RefreshServiceDep,
) -> list[RefreshOutcome]:
    """
    Runs the scheduled refresh job now instead of waiting for the next cycle.
    """
    job_id = container.settings.refresh_job_id
    try:
        ran = await scheduler.run_job(job_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job '{job_id}' is not scheduled.",
        )
    if not ran:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job '{job_id}' is already running.",
        )
    return list(service.last_outcomes.values())


@router.get("/status", response_model=SchedulerStatus)
async def refresh_status(
    operator: OperatorDep,
    scheduler: SchedulerDep,
    service: RefreshServiceDep,
) -> SchedulerStatus:
    return SchedulerStatus(
        state=scheduler.state.value,
        jobs=scheduler.job_ids,
        running=scheduler.running_job_ids,
        last_outcomes=list(service.last_outcomes.values()),
    )
