import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.responses import JSONResponse
from uuid import UUID
from datetime import date, timedelta
from typing import List, Optional
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Catalogue
    VillaResponse, PackageResponse, SafariOptionResponse,
    CreateVillaRequest, UpdateVillaRequest, UpdateVillaPricingRequest,
    CreatePackageRequest, UpdatePackageRequest,
    # Availability & pricing
    AvailabilityResponse, AvailableVillaResponse, NightlyPriceResponse,
    QuoteResponse, QuoteNightResponse,
    CreatePricingRuleRequest, PricingRuleResponse, SetDateOverrideRequest, DateOverrideResponse,
    # Holds
    CreateHoldRequest, HoldResponse,
    # Bookings
    CreateBookingRequest, ModifyBookingRequest, RecordPaymentRequest,
    BookingResponse, SafariRequestResponse, BookingStatsResponse, OccupancyStatsResponse,
    # Safari enquiries
    CreateSafariEnquiryRequest, UpdateEnquiryStatusRequest, SafariEnquiryResponse, EnquiryStatsResponse,
    # Auth
    Token, UserResponse
)

from api.dependencies import get_current_active_user, admin_users_db, get_user
from infrastructure.security import verify_password, create_access_token
from infrastructure import config
from infrastructure.seed import seed_demo_data
from domain.auth import User
from domain.entities import Villa, Package

from application.services import (
    CatalogService, AvailabilityService, PricingService, HoldService,
    BookingService, SafariEnquiryService
)
from application.validation import BookingDraft, SafariSelection
from infrastructure.repositories.in_memory_repositories import (
    InMemoryVillaRepository, InMemoryPackageRepository, InMemorySafariOptionRepository,
    InMemoryPricingRepository, InMemoryBookingRepository, InMemoryHoldRepository,
    InMemorySafariEnquiryRepository
)
from domain.enums import (
    BookingStatus, PaymentStatus, VillaStatus, PricingRuleType, BookingSource,
    SafariTiming, EnquiryStatus
)
from domain.exceptions import ValidationError, AvailabilityError, NotFoundError, StoreUnavailableError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize repositories
villa_repo = InMemoryVillaRepository()
package_repo = InMemoryPackageRepository()
safari_repo = InMemorySafariOptionRepository()
pricing_repo = InMemoryPricingRepository()
booking_repo = InMemoryBookingRepository()
hold_repo = InMemoryHoldRepository()
enquiry_repo = InMemorySafariEnquiryRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.SEED_DEMO_DATA:
        await seed_demo_data(villa_repo, package_repo, safari_repo)
    yield


app = FastAPI(
    title="Villa Booking API",
    description="Booking core for a villa resort: availability, pricing and booking records",
    version="1.0.0",
    lifespan=lifespan
)

# Dependency injection
def get_catalog_service() -> CatalogService:
    return CatalogService(villa_repo, package_repo, safari_repo, booking_repo)

def get_availability_service() -> AvailabilityService:
    return AvailabilityService(booking_repo, villa_repo)

def get_pricing_service() -> PricingService:
    return PricingService(villa_repo, pricing_repo)

def get_hold_service() -> HoldService:
    return HoldService(hold_repo, get_availability_service())

def get_booking_service() -> BookingService:
    return BookingService(
        booking_repo, villa_repo, package_repo, safari_repo,
        get_availability_service(), hold_repo
    )

def get_enquiry_service() -> SafariEnquiryService:
    return SafariEnquiryService(enquiry_repo, safari_repo, booking_repo)

# ============================================================================
# ERROR MAPPING
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": {"message": exc.message, "errors": [e.model_dump() for e in exc.errors]}}
    )

@app.exception_handler(AvailabilityError)
async def availability_error_handler(request: Request, exc: AvailabilityError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Store unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Booking store is temporarily unavailable"})

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/booking-status", tags=["Enum Reference"])
async def get_booking_statuses():
    """Get all BookingStatus enum values"""
    return {
        "values": [item.value for item in BookingStatus],
        "description": "Booking status values: pending, confirmed, cancelled, completed"
    }

@app.get("/api/enums/payment-status", tags=["Enum Reference"])
async def get_payment_statuses():
    """Get all PaymentStatus enum values"""
    return {
        "values": [item.value for item in PaymentStatus],
        "description": "Payment status values: pending, advance_paid, paid, failed, refunded"
    }

@app.get("/api/enums/villa-status", tags=["Enum Reference"])
async def get_villa_statuses():
    return {"values": [item.value for item in VillaStatus]}

@app.get("/api/enums/pricing-rule-type", tags=["Enum Reference"])
async def get_pricing_rule_types():
    return {"values": [item.value for item in PricingRuleType]}

@app.get("/api/enums/booking-source", tags=["Enum Reference"])
async def get_booking_sources():
    return {"values": [item.value for item in BookingSource]}

@app.get("/api/enums/safari-timing", tags=["Enum Reference"])
async def get_safari_timings():
    return {"values": [item.value for item in SafariTiming]}

@app.get("/api/enums/enquiry-status", tags=["Enum Reference"])
async def get_enquiry_statuses():
    return {"values": [item.value for item in EnquiryStatus]}

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(admin_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning("Failed login attempt for %s", form_data.username)
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username, "role": user.role}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return current_user

# ============================================================================
# CATALOGUE ENDPOINTS
# ============================================================================

@app.get("/api/villas", response_model=List[VillaResponse], tags=["Catalogue"])
async def get_active_villas(
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service)
):
    """Get bookable villas, cheapest first"""
    villas = await service.get_active_villas()
    return [_villa_to_response(v, availability.total_units(v.id)) for v in villas]

@app.get("/api/villas/all", response_model=List[VillaResponse], tags=["Catalogue"])
async def get_all_villas(
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all villas including inactive ones"""
    villas = await service.get_all_villas()
    return [_villa_to_response(v, availability.total_units(v.id)) for v in villas]

@app.get("/api/villas/{villa_id}", response_model=VillaResponse, tags=["Catalogue"])
async def get_villa(
    villa_id: str,
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service)
):
    villa = await service.get_villa(villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return _villa_to_response(villa, availability.total_units(villa.id))

@app.post("/api/villas/{villa_id}/toggle-status", response_model=VillaResponse, tags=["Catalogue"])
async def toggle_villa_status(
    villa_id: str,
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Switch a villa between active and inactive"""
    villa = await service.toggle_villa_status(villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return _villa_to_response(villa, availability.total_units(villa.id))

@app.post("/api/villas", response_model=VillaResponse, status_code=201, tags=["Catalogue"])
async def create_villa(
    request: CreateVillaRequest,
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Add a villa to the catalogue"""
    villa = await service.create_villa(Villa(**request.model_dump()))
    return _villa_to_response(villa, availability.total_units(villa.id))

@app.put("/api/villas/{villa_id}", response_model=VillaResponse, tags=["Catalogue"])
async def update_villa(
    villa_id: str,
    request: UpdateVillaRequest,
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Edit villa details"""
    villa = await service.update_villa(villa_id, **request.model_dump())
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return _villa_to_response(villa, availability.total_units(villa.id))

@app.put("/api/villas/{villa_id}/pricing", response_model=VillaResponse, tags=["Catalogue"])
async def update_villa_pricing(
    villa_id: str,
    request: UpdateVillaPricingRequest,
    service: CatalogService = Depends(get_catalog_service),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Set the base nightly price of a villa"""
    villa = await service.update_villa_pricing(villa_id, request.base_price)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return _villa_to_response(villa, availability.total_units(villa.id))

@app.get("/api/packages", response_model=List[PackageResponse], tags=["Catalogue"])
async def get_packages(service: CatalogService = Depends(get_catalog_service)):
    packages = await service.get_active_packages()
    return [_package_to_response(p) for p in packages]

@app.get("/api/packages/all", response_model=List[PackageResponse], tags=["Catalogue"])
async def get_all_packages(
    service: CatalogService = Depends(get_catalog_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all packages including inactive ones"""
    packages = await service.get_all_packages()
    return [_package_to_response(p) for p in packages]

@app.post("/api/packages", response_model=PackageResponse, status_code=201, tags=["Catalogue"])
async def create_package(
    request: CreatePackageRequest,
    service: CatalogService = Depends(get_catalog_service),
    current_user: User = Depends(get_current_active_user)
):
    package = await service.create_package(Package(**request.model_dump()))
    return _package_to_response(package)

@app.put("/api/packages/{package_id}", response_model=PackageResponse, tags=["Catalogue"])
async def update_package(
    package_id: str,
    request: UpdatePackageRequest,
    service: CatalogService = Depends(get_catalog_service),
    current_user: User = Depends(get_current_active_user)
):
    package = await service.update_package(package_id, **request.model_dump())
    if not package:
        raise HTTPException(status_code=404, detail="Package not found")
    return _package_to_response(package)

@app.post("/api/packages/{package_id}/toggle-status", response_model=PackageResponse, tags=["Catalogue"])
async def toggle_package_status(
    package_id: str,
    service: CatalogService = Depends(get_catalog_service),
    current_user: User = Depends(get_current_active_user)
):
    """Switch a package between active and inactive"""
    package = await service.toggle_package_status(package_id)
    if not package:
        raise HTTPException(status_code=404, detail="Package not found")
    return _package_to_response(package)

@app.delete("/api/packages/{package_id}", status_code=204, tags=["Catalogue"])
async def delete_package(
    package_id: str,
    service: CatalogService = Depends(get_catalog_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete a package that no booking uses"""
    if not await service.delete_package(package_id):
        raise HTTPException(status_code=404, detail="Package not found")

@app.get("/api/safari-options", response_model=List[SafariOptionResponse], tags=["Catalogue"])
async def get_safari_options(service: CatalogService = Depends(get_catalog_service)):
    options = await service.get_active_safari_options()
    return [
        SafariOptionResponse(
            id=o.id, name=o.name, description=o.description, duration=o.duration,
            price=o.price, max_persons=o.max_persons,
            timings=[t.value for t in o.timings], highlights=o.highlights
        )
        for o in options
    ]

# ============================================================================
# AVAILABILITY & PRICING ENDPOINTS
# ============================================================================

@app.get("/api/availability", response_model=List[AvailableVillaResponse], tags=["Availability"])
async def get_available_villas(
    check_in: date,
    check_out: date,
    service: AvailabilityService = Depends(get_availability_service)
):
    """Get active villas with at least one free unit for the stay"""
    results = await service.get_available_villas(check_in, check_out)
    return [
        AvailableVillaResponse(
            villa=_villa_to_response(r["villa"], r["total_units"]),
            available_units=r["available_units"]
        )
        for r in results
    ]

@app.get("/api/availability/{villa_id}", response_model=AvailabilityResponse, tags=["Availability"])
async def check_availability(
    villa_id: str,
    check_in: date,
    check_out: date,
    service: AvailabilityService = Depends(get_availability_service)
):
    """Check free units of a villa for [check_in, check_out)"""
    summary = await service.get_unit_summary(villa_id, check_in, check_out)
    return AvailabilityResponse(
        villa_id=villa_id,
        check_in=check_in,
        check_out=check_out,
        available=summary["available_units"] > 0,
        **summary
    )

@app.get("/api/villas/{villa_id}/price", response_model=NightlyPriceResponse, tags=["Pricing"])
async def get_villa_price(
    villa_id: str,
    on_date: date,
    service: PricingService = Depends(get_pricing_service)
):
    """Get the nightly price of a villa on a date"""
    price = await service.get_villa_pricing(villa_id, on_date)
    return NightlyPriceResponse(villa_id=villa_id, on_date=on_date, price=price, currency=config.CURRENCY)

@app.get("/api/villas/{villa_id}/quote", response_model=QuoteResponse, tags=["Pricing"])
async def quote_stay(
    villa_id: str,
    check_in: date,
    check_out: date,
    service: PricingService = Depends(get_pricing_service)
):
    """Get per-night prices for a stay"""
    nights = await service.quote_stay(villa_id, check_in, check_out)
    return QuoteResponse(
        villa_id=villa_id,
        check_in=check_in,
        check_out=check_out,
        nights=[QuoteNightResponse(night=n.night, price=n.price) for n in nights],
        total=sum(n.price for n in nights),
        currency=config.CURRENCY
    )

@app.post("/api/pricing-rules", response_model=PricingRuleResponse, status_code=201, tags=["Pricing"])
async def create_pricing_rule(
    request: CreatePricingRuleRequest,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    rule = await service.create_rule(
        rule_name=request.rule_name,
        price_modifier=request.price_modifier,
        start_date=request.start_date,
        end_date=request.end_date,
        villa_id=request.villa_id,
        rule_type=request.rule_type,
        is_active=request.is_active
    )
    return _rule_to_response(rule)

@app.get("/api/pricing-rules", response_model=List[PricingRuleResponse], tags=["Pricing"])
async def get_pricing_rules(
    villa_id: Optional[str] = None,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    rules = await service.get_rules(villa_id)
    return [_rule_to_response(r) for r in rules]

@app.post("/api/pricing-rules/{rule_id}/toggle", response_model=PricingRuleResponse, tags=["Pricing"])
async def toggle_pricing_rule(
    rule_id: UUID,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    rule = await service.toggle_rule(rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Pricing rule not found")
    return _rule_to_response(rule)

@app.delete("/api/pricing-rules/{rule_id}", status_code=204, tags=["Pricing"])
async def delete_pricing_rule(
    rule_id: UUID,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    if not await service.delete_rule(rule_id):
        raise HTTPException(status_code=404, detail="Pricing rule not found")

@app.put("/api/date-overrides", response_model=DateOverrideResponse, tags=["Pricing"])
async def set_date_override(
    request: SetDateOverrideRequest,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Pin the price of a villa on one date"""
    override = await service.set_override(request.villa_id, request.on_date, request.price_override, request.notes)
    return _override_to_response(override)

@app.get("/api/date-overrides/{villa_id}", response_model=List[DateOverrideResponse], tags=["Pricing"])
async def get_date_overrides(
    villa_id: str,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    overrides = await service.get_overrides(villa_id)
    return [_override_to_response(o) for o in overrides]

@app.delete("/api/date-overrides/{villa_id}/{on_date}", status_code=204, tags=["Pricing"])
async def delete_date_override(
    villa_id: str,
    on_date: date,
    service: PricingService = Depends(get_pricing_service),
    current_user: User = Depends(get_current_active_user)
):
    if not await service.delete_override(villa_id, on_date):
        raise HTTPException(status_code=404, detail="Date override not found")

# ============================================================================
# HOLD ENDPOINTS
# ============================================================================

@app.post("/api/holds", response_model=HoldResponse, status_code=201, tags=["Holds"])
async def create_hold(
    request: CreateHoldRequest,
    service: HoldService = Depends(get_hold_service)
):
    """Hold a unit while the guest completes payment"""
    hold = await service.create_hold(request.villa_id, request.check_in, request.check_out, request.session_id)
    return HoldResponse(
        hold_id=hold.hold_id,
        villa_id=hold.villa_id,
        check_in=hold.date_range.check_in,
        check_out=hold.date_range.check_out,
        session_id=hold.session_id,
        created_at=hold.created_at,
        expires_at=hold.expires_at
    )

@app.delete("/api/holds/{session_id}", tags=["Holds"])
async def release_holds(
    session_id: str,
    service: HoldService = Depends(get_hold_service)
):
    released = await service.release_holds(session_id)
    return {"released": released}

@app.post("/api/holds/cleanup", tags=["Holds"])
async def cleanup_expired_holds(
    service: HoldService = Depends(get_hold_service),
    current_user: User = Depends(get_current_active_user)
):
    """Remove holds past their expiry"""
    removed = await service.cleanup_expired_holds()
    return {"removed": removed}

# ============================================================================
# BOOKING ENDPOINTS
# ============================================================================

@app.post("/api/bookings", response_model=BookingResponse, status_code=201, tags=["Bookings"])
async def create_booking(
    request: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service)
):
    """Create a pending booking from the completed wizard"""
    draft = BookingDraft(
        villa_id=request.villa_id,
        check_in=request.check_in,
        check_out=request.check_out,
        guests=request.guests,
        package_id=request.package_id,
        safari_requests=[
            SafariSelection(
                safari_option_id=s.safari_option_id,
                preferred_date=s.preferred_date,
                preferred_timing=s.preferred_timing,
                persons=s.persons
            )
            for s in request.safari_requests
        ],
        guest_name=request.guest_name,
        email=request.email,
        phone=request.phone,
        special_requests=request.special_requests,
        session_id=request.session_id,
        booking_source=request.booking_source
    )
    booking = await service.create_booking(draft)
    return _booking_to_response(booking)

@app.get("/api/bookings", response_model=List[BookingResponse], tags=["Bookings"])
async def get_bookings(
    status: Optional[BookingStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    villa_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get bookings, newest first"""
    bookings = await service.get_bookings(status, payment_status, villa_id, date_from, date_to)
    return [_booking_to_response(b) for b in bookings]

@app.get("/api/bookings/stats", response_model=BookingStatsResponse, tags=["Statistics"])
async def get_booking_stats(
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    return await service.get_booking_stats()

@app.get("/api/bookings/occupancy", response_model=OccupancyStatsResponse, tags=["Statistics"])
async def get_occupancy_stats(
    start_date: date,
    end_date: date,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Unit-night occupancy over [start_date, end_date)"""
    return await service.get_occupancy_stats(start_date, end_date)

@app.get("/api/bookings/code/{booking_code}", response_model=BookingResponse, tags=["Bookings"])
async def get_booking_by_code(
    booking_code: str,
    service: BookingService = Depends(get_booking_service)
):
    """Get booking by booking code"""
    booking = await service.get_booking_by_code(booking_code)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.get("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    booking = await service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.put("/api/bookings/{booking_id}", response_model=BookingResponse, tags=["Bookings"])
async def modify_booking(
    booking_id: UUID,
    request: ModifyBookingRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Modify booking details"""
    booking = await service.modify_booking(
        booking_id=booking_id,
        guest_name=request.guest_name,
        email=request.email,
        phone=request.phone,
        check_in=request.check_in,
        check_out=request.check_out,
        guests=request.guests,
        special_requests=request.special_requests,
        admin_notes=request.admin_notes
    )
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/payments", response_model=BookingResponse, tags=["Bookings"])
async def record_payment(
    booking_id: UUID,
    request: RecordPaymentRequest,
    service: BookingService = Depends(get_booking_service)
):
    """Record an advance or full payment"""
    booking = await service.record_payment(booking_id, request.amount, request.reference)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/payment-failed", response_model=BookingResponse, tags=["Bookings"])
async def mark_payment_failed(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    booking = await service.mark_payment_failed(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/confirm", response_model=BookingResponse, tags=["Bookings"])
async def confirm_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Confirm booking after payment"""
    booking = await service.confirm_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/cancel", response_model=BookingResponse, tags=["Bookings"])
async def cancel_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    booking = await service.cancel_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/complete", response_model=BookingResponse, tags=["Bookings"])
async def complete_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    booking = await service.complete_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.post("/api/bookings/{booking_id}/refund", response_model=BookingResponse, tags=["Bookings"])
async def refund_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    booking = await service.refund_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_response(booking)

@app.delete("/api/bookings/{booking_id}", status_code=204, tags=["Bookings"])
async def delete_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    if not await service.delete_booking(booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")

# ============================================================================
# SAFARI ENQUIRY ENDPOINTS
# ============================================================================

@app.post("/api/safari-enquiries", response_model=SafariEnquiryResponse, status_code=201, tags=["Safari Enquiries"])
async def create_safari_enquiry(
    request: CreateSafariEnquiryRequest,
    service: SafariEnquiryService = Depends(get_enquiry_service)
):
    """Raise a safari enquiry against an existing booking"""
    enquiry = await service.create_enquiry(
        booking_code=request.booking_code,
        safari_option_id=request.safari_option_id,
        preferred_date=request.preferred_date,
        preferred_timing=request.preferred_timing,
        number_of_persons=request.number_of_persons,
        guest_name=request.guest_name,
        email=request.email,
        phone=request.phone,
        special_requirements=request.special_requirements
    )
    return _enquiry_to_response(enquiry)

@app.get("/api/safari-enquiries", response_model=List[SafariEnquiryResponse], tags=["Safari Enquiries"])
async def get_safari_enquiries(
    status: Optional[EnquiryStatus] = None,
    service: SafariEnquiryService = Depends(get_enquiry_service),
    current_user: User = Depends(get_current_active_user)
):
    enquiries = await service.get_enquiries(status)
    return [_enquiry_to_response(e) for e in enquiries]

@app.get("/api/safari-enquiries/stats", response_model=EnquiryStatsResponse, tags=["Safari Enquiries"])
async def get_safari_enquiry_stats(
    service: SafariEnquiryService = Depends(get_enquiry_service),
    current_user: User = Depends(get_current_active_user)
):
    return await service.get_stats()

@app.get("/api/safari-enquiries/{enquiry_id}", response_model=SafariEnquiryResponse, tags=["Safari Enquiries"])
async def get_safari_enquiry(
    enquiry_id: str,
    service: SafariEnquiryService = Depends(get_enquiry_service),
    current_user: User = Depends(get_current_active_user)
):
    enquiry = await service.get_enquiry(enquiry_id)
    if not enquiry:
        raise HTTPException(status_code=404, detail="Safari enquiry not found")
    return _enquiry_to_response(enquiry)

@app.put("/api/safari-enquiries/{enquiry_id}/status", response_model=SafariEnquiryResponse, tags=["Safari Enquiries"])
async def update_safari_enquiry_status(
    enquiry_id: str,
    request: UpdateEnquiryStatusRequest,
    service: SafariEnquiryService = Depends(get_enquiry_service),
    current_user: User = Depends(get_current_active_user)
):
    enquiry = await service.update_status(enquiry_id, request.status, request.admin_notes)
    if not enquiry:
        raise HTTPException(status_code=404, detail="Safari enquiry not found")
    return _enquiry_to_response(enquiry)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _villa_to_response(villa, total_units: int) -> VillaResponse:
    return VillaResponse(
        id=villa.id,
        name=villa.name,
        description=villa.description,
        base_price=villa.base_price,
        max_guests=villa.max_guests,
        status=villa.status.value,
        amenities=villa.amenities,
        images=villa.images,
        total_units=total_units
    )

def _package_to_response(package) -> PackageResponse:
    return PackageResponse(
        id=package.id,
        name=package.name,
        description=package.description,
        inclusions=package.inclusions,
        price=package.price,
        duration=package.duration,
        is_active=package.is_active
    )

def _rule_to_response(rule) -> PricingRuleResponse:
    return PricingRuleResponse(
        rule_id=rule.rule_id,
        villa_id=rule.villa_id,
        rule_name=rule.rule_name,
        rule_type=rule.rule_type.value,
        price_modifier=rule.price_modifier,
        is_active=rule.is_active,
        start_date=rule.start_date,
        end_date=rule.end_date,
        created_at=rule.created_at
    )

def _override_to_response(override) -> DateOverrideResponse:
    return DateOverrideResponse(
        villa_id=override.villa_id,
        on_date=override.on_date,
        price_override=override.price_override,
        notes=override.notes
    )

def _booking_to_response(booking) -> BookingResponse:
    """Convert Booking entity to BookingResponse"""
    return BookingResponse(
        booking_id=booking.booking_id,
        booking_code=booking.booking_code,
        villa_id=booking.villa_id,
        villa_name=booking.villa_name,
        villa_price=booking.villa_price,
        check_in=booking.date_range.check_in,
        check_out=booking.date_range.check_out,
        nights=booking.get_nights(),
        guests=booking.guests,
        package_id=booking.package_id,
        package_name=booking.package_name,
        package_price=booking.package_price,
        safari_requests=[
            SafariRequestResponse(
                safari_option_id=s.safari_option_id,
                safari_name=s.safari_name,
                price=s.price,
                preferred_date=s.preferred_date,
                preferred_timing=s.preferred_timing.value if s.preferred_timing else None,
                persons=s.persons
            )
            for s in booking.safari_requests
        ],
        safari_total=booking.safari_total,
        subtotal=booking.subtotal,
        taxes=booking.taxes,
        total_amount=booking.total_amount,
        advance_amount=booking.advance_amount,
        remaining_amount=booking.remaining_amount,
        currency=config.CURRENCY,
        status=booking.status.value,
        payment_status=booking.payment_status.value,
        payment_reference=booking.payment_reference,
        guest_name=booking.contact.guest_name,
        email=booking.contact.email,
        phone=booking.contact.phone,
        special_requests=booking.special_requests,
        admin_notes=booking.admin_notes,
        booking_source=booking.booking_source.value,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        version=booking.version
    )

def _enquiry_to_response(enquiry) -> SafariEnquiryResponse:
    return SafariEnquiryResponse(
        enquiry_id=enquiry.enquiry_id,
        booking_code=enquiry.booking_code,
        safari_option_id=enquiry.safari_option_id,
        safari_name=enquiry.safari_name,
        preferred_date=enquiry.preferred_date,
        preferred_timing=enquiry.preferred_timing.value,
        number_of_persons=enquiry.number_of_persons,
        special_requirements=enquiry.special_requirements,
        guest_name=enquiry.contact.guest_name,
        email=enquiry.contact.email,
        phone=enquiry.contact.phone,
        status=enquiry.status.value,
        admin_notes=enquiry.admin_notes,
        created_at=enquiry.created_at,
        updated_at=enquiry.updated_at
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
