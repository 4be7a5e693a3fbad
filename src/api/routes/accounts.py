"""Customer access endpoints."""

from fastapi import APIRouter, Depends

from accounts import AccountService
from api.deps import get_account_service, get_current_customer
from api.schemas import AccountResponse, Envelope, SignupWebhookRequest, VerifyAccessRequest
from db.models import Customer
from errors import InputError

router = APIRouter(tags=["Accounts"])


@router.post(
    "/verify-access",
    response_model=Envelope,
    summary="Exchange an access code for a session token",
)
def verify_access(
    request: VerifyAccessRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Envelope:
    if not request.email or not request.access_code:
        raise InputError("Email and access code are required")

    token, customer = accounts.verify_access(request.email, request.access_code)
    return Envelope(
        data={
            "token": token,
            "user": {
                "email": customer.email,
                "joinDate": customer.issued_at.isoformat(),
            },
        },
        message="Access verified successfully",
    )


@router.post(
    "/ghl-webhook",
    response_model=Envelope,
    summary="Signup webhook",
    description="Provision a customer after checkout and issue an access code.",
)
def signup_webhook(
    request: SignupWebhookRequest,
    accounts: AccountService = Depends(get_account_service),
) -> Envelope:
    contact = request.contact.model_dump(by_alias=True) if request.contact else None
    payment = request.payment.model_dump() if request.payment else None

    registration = accounts.register_from_webhook(contact, payment)
    return Envelope(
        data={
            "accessCode": registration.customer.access_code,
            "created": registration.created,
        },
        message=(
            "Customer registered successfully"
            if registration.created
            else "Customer access renewed"
        ),
    )


@router.get(
    "/account",
    response_model=Envelope,
    summary="Current customer",
    description="Requires the bearer token returned by /verify-access.",
)
def get_account(
    customer: Customer = Depends(get_current_customer),
) -> Envelope:
    account = AccountResponse(
        email=customer.email,
        name=customer.name,
        join_date=customer.issued_at,
        access_expires_at=AccountService.access_expires_at(customer),
        last_login=customer.last_login,
    )
    return Envelope(data=account.model_dump(mode="json", by_alias=True))
