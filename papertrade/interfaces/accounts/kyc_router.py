"""
FastAPI router for KYC submissions and their review.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, status

from papertrade.application.accounts.dtos import SubmitKycCommand
from papertrade.application.accounts.kyc import (
    GetKycStatusUseCase,
    ListKycRecordsUseCase,
    SubmitKycUseCase,
    UpdateKycStatusUseCase,
)
from papertrade.application.audit_trail import RequestContext
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.accounts.dependencies import (
    get_kyc_status_use_case,
    get_list_kyc_use_case,
    get_submit_kyc_use_case,
    get_update_kyc_status_use_case,
)
from papertrade.interfaces.accounts.schemas import (
    KycData,
    KycListData,
    KycSchema,
    KycStatusUpdateRequest,
    KycSubmitRequest,
)
from papertrade.interfaces.dependencies import (
    get_current_user,
    get_request_context,
    require_admin,
)
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok

router = APIRouter(prefix="/kyc", tags=["kyc"], responses=ERROR_RESPONSES)


@router.post(
    "/submit",
    response_model=Envelope[KycData],
    status_code=status.HTTP_201_CREATED,
    summary="Submit KYC details",
    description="One submission per user. The record starts as `pending`.",
)
def submit_kyc(
    request: KycSubmitRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: SubmitKycUseCase = Depends(get_submit_kyc_use_case),
) -> dict:
    command = SubmitKycCommand(
        user_id=user.id,
        name=request.name,
        email=request.email,
        pan_number=request.pan_number,
        address=request.address,
        phone=request.phone,
    )
    record = use_case.execute(command, context)
    return ok(
        KycData(kyc=KycSchema.model_validate(record)),
        message="KYC details submitted successfully",
    )


@router.get("/status", response_model=Envelope[KycData], summary="My KYC status")
def kyc_status(
    user: User = Depends(get_current_user),
    use_case: GetKycStatusUseCase = Depends(get_kyc_status_use_case),
) -> dict:
    record = use_case.execute(user.id)
    return ok(KycData(kyc=KycSchema.model_validate(record) if record else None))


@router.get("/all", response_model=Envelope[KycListData], summary="All submissions (admin)")
def list_kyc(
    _admin: User = Depends(require_admin),
    use_case: ListKycRecordsUseCase = Depends(get_list_kyc_use_case),
) -> dict:
    records = use_case.execute()
    return ok(KycListData(kyc_records=[KycSchema.model_validate(r) for r in records]))


@router.put(
    "/{kyc_id}/status",
    response_model=Envelope[KycData],
    summary="Review a submission (admin)",
)
def update_kyc_status(
    kyc_id: int,
    request: KycStatusUpdateRequest,
    admin: User = Depends(require_admin),
    context: RequestContext = Depends(get_request_context),
    use_case: UpdateKycStatusUseCase = Depends(get_update_kyc_status_use_case),
) -> dict:
    record = use_case.execute(kyc_id, request.status, admin.id, context)
    return ok(
        KycData(kyc=KycSchema.model_validate(record)),
        message=f"KYC status updated to {record.status.value}",
    )
