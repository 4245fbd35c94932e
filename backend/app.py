from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOG_LEVEL
from schemas import (
    ShiftSchema,
    ShiftCreateRequest,
    ShiftAdmissionResponse,
    ValidateShiftRequest,
    ValidationResultSchema,
    ShiftRequestCreate,
    ShiftRequestSchema,
    ShiftRequestDecision,
    ShiftRequestDecisionResponse,
    ShiftRulesSchema,
)
from scheduling import (
    OverlapPolicy,
    ShiftRepository,
    ShiftRequestRepository,
    ShiftRequestStatus,
    ShiftRules,
    ShiftValidator,
    ValidationResult,
    ValidationStatus,
    admit_shift,
    delete_shift as delete_stored_shift,
    submit_shift_request,
    respond_to_shift_request,
    ShiftConflictError,
    ShiftNotFoundError,
    ShiftRequestAlreadyResolvedError,
    ShiftRequestNotFoundError,
)
from db import (
    init_db,
    BeanieShiftRepository,
    BeanieShiftRequestRepository,
    get_shift_rules,
    save_shift_rules,
)
from db.database import close_db
from utils import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    await init_db()
    yield
    await close_db()


def get_shift_repository() -> ShiftRepository:
    return BeanieShiftRepository()


def get_shift_request_repository() -> ShiftRequestRepository:
    return BeanieShiftRequestRepository()


async def get_rules() -> ShiftRules:
    return await get_shift_rules()


async def get_validator(rules: ShiftRules = Depends(get_rules)) -> ShiftValidator:
    return ShiftValidator(rules)


app = FastAPI(title="shiftValidator", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _raise_for_rejection(validation: ValidationResult):
    """Turn a failed validation into the matching HTTP error."""
    if validation.status == ValidationStatus.INVALID_INPUT:
        raise HTTPException(status_code=422, detail=validation.to_dict())
    raise HTTPException(status_code=400, detail=validation.to_dict())


@app.post("/shifts/validate", response_model=ValidationResultSchema)
async def validate_shift_endpoint(
    request: ValidateShiftRequest,
    validator: ShiftValidator = Depends(get_validator),
):
    result = validator.validate(
        request.candidate.model_dump(),
        [s.model_dump() for s in request.existing_shifts],
        request.editing_shift_id,
    )
    return result.to_dict()


@app.get("/employees/{employee_id}/shifts", response_model=list[ShiftSchema])
async def get_employee_shifts(
    employee_id: str,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
):
    shifts = await shift_repo.list_for_employee(employee_id)
    return [s.to_dict() for s in shifts]


@app.post("/shifts", response_model=ShiftAdmissionResponse, status_code=201)
async def create_shift(
    request: ShiftCreateRequest,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
    validator: ShiftValidator = Depends(get_validator),
):
    try:
        admission = await admit_shift(shift_repo, request.model_dump(), validator=validator)
    except ShiftConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not admission.admitted:
        _raise_for_rejection(admission.validation)

    return admission.to_dict()


@app.put("/shifts/{shift_id}", response_model=ShiftAdmissionResponse)
async def update_shift(
    shift_id: str,
    request: ShiftCreateRequest,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
    validator: ShiftValidator = Depends(get_validator),
):
    try:
        admission = await admit_shift(
            shift_repo, request.model_dump(), editing_shift_id=shift_id, validator=validator
        )
    except ShiftNotFoundError:
        raise HTTPException(status_code=404, detail="Shift not found")
    except ShiftConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not admission.admitted:
        _raise_for_rejection(admission.validation)

    return admission.to_dict()


@app.delete("/shifts/{shift_id}")
async def delete_shift(
    shift_id: str,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
):
    try:
        await delete_stored_shift(shift_repo, shift_id)
    except ShiftNotFoundError:
        raise HTTPException(status_code=404, detail="Shift not found")
    return {"success": True, "deleted_id": shift_id}


@app.post("/shift-requests", response_model=ShiftRequestSchema, status_code=201)
async def create_shift_request(
    request: ShiftRequestCreate,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
    request_repo: ShiftRequestRepository = Depends(get_shift_request_repository),
    validator: ShiftValidator = Depends(get_validator),
):
    admission = await submit_shift_request(
        shift_repo,
        request_repo,
        request.model_dump(exclude={"reason"}),
        reason=request.reason,
        validator=validator,
    )
    if not admission.admitted:
        _raise_for_rejection(admission.validation)

    return admission.request.to_dict()


@app.get("/shift-requests", response_model=list[ShiftRequestSchema])
async def get_shift_requests(
    status: ShiftRequestStatus | None = None,
    request_repo: ShiftRequestRepository = Depends(get_shift_request_repository),
):
    requests = await request_repo.list_requests(status)
    return [r.to_dict() for r in requests]


@app.post("/shift-requests/{request_id}/respond", response_model=ShiftRequestDecisionResponse)
async def respond_to_request(
    request_id: str,
    decision: ShiftRequestDecision,
    shift_repo: ShiftRepository = Depends(get_shift_repository),
    request_repo: ShiftRequestRepository = Depends(get_shift_request_repository),
    validator: ShiftValidator = Depends(get_validator),
):
    try:
        result = await respond_to_shift_request(
            shift_repo,
            request_repo,
            request_id,
            decision.status,
            response_message=decision.response_message,
            validator=validator,
        )
    except ShiftRequestNotFoundError:
        raise HTTPException(status_code=404, detail="Shift request not found")
    except ShiftRequestAlreadyResolvedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShiftConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not result.admitted:
        _raise_for_rejection(result.validation)

    return result.to_dict()


@app.get("/config/rules", response_model=ShiftRulesSchema)
async def get_rules_config(rules: ShiftRules = Depends(get_rules)):
    return rules.to_dict()


@app.post("/config/rules", response_model=ShiftRulesSchema)
async def update_rules_config(request: ShiftRulesSchema):
    if request.max_shift_hours < request.min_shift_hours:
        raise HTTPException(status_code=400, detail="max_shift_hours must not be less than min_shift_hours")

    rules = ShiftRules(
        min_duration_minutes=round(request.min_shift_hours * 60),
        max_duration_minutes=round(request.max_shift_hours * 60),
        min_rest_minutes=round(request.min_rest_hours * 60),
        overlap_policy=OverlapPolicy(request.overlap_policy),
    )
    saved = await save_shift_rules(rules)
    return saved.to_dict()
