"""Demo catalogue loaded at startup"""
import logging

from domain.entities import Villa, Package, SafariOption
from domain.enums import SafariTiming
from domain.repositories import VillaRepository, PackageRepository, SafariOptionRepository

logger = logging.getLogger(__name__)

DEMO_VILLAS = [
    Villa(
        id="glass-cottage",
        name="Glass Cottage",
        description="Luxurious glass-walled cottage with panoramic forest views",
        base_price=15000,
        max_guests=4,
        amenities=["Wi-Fi", "Air Conditioning", "Private Deck", "Forest View"],
        images=["/images/glass-cottage/1.jpg"]
    ),
    Villa(
        id="hornbill-villa",
        name="Hornbill Villa",
        description="Spacious villa with a private garden, named after the great hornbill",
        base_price=18000,
        max_guests=6,
        amenities=["Wi-Fi", "Air Conditioning", "Private Garden", "Bathtub"],
        images=["/images/hornbill-villa/1.jpg"]
    ),
    Villa(
        id="kingfisher-villa",
        name="Kingfisher Villa",
        description="Premium lakeside villa with a plunge pool",
        base_price=22000,
        max_guests=8,
        amenities=["Wi-Fi", "Air Conditioning", "Plunge Pool", "Lake View"],
        images=["/images/kingfisher-villa/1.jpg"]
    ),
]

DEMO_PACKAGES = [
    Package(
        id="basic-stay",
        name="Basic Stay",
        description="Room only",
        inclusions=["Accommodation", "Welcome drink"],
        price=0
    ),
    Package(
        id="breakfast-package",
        name="Breakfast Package",
        description="Stay with daily breakfast",
        inclusions=["Accommodation", "Welcome drink", "Daily breakfast"],
        price=500
    ),
]

DEMO_SAFARI_OPTIONS = [
    SafariOption(
        id="morning-safari",
        name="Morning Safari",
        description="Early jeep safari through the core zone",
        duration="3 hours",
        price=0,
        timings=[SafariTiming.MORNING],
        highlights=["Tiger sightings", "Bird watching"]
    ),
    SafariOption(
        id="evening-safari",
        name="Evening Safari",
        description="Golden-hour jeep safari",
        duration="3 hours",
        price=0,
        timings=[SafariTiming.EVENING],
        highlights=["Sunset views", "Deer herds"]
    ),
    SafariOption(
        id="night-safari",
        name="Night Safari",
        description="Guided buffer-zone drive after dark",
        duration="2 hours",
        price=0,
        timings=[SafariTiming.NIGHT],
        highlights=["Nocturnal wildlife", "Star gazing"]
    ),
]


async def seed_demo_data(
    villa_repo: VillaRepository,
    package_repo: PackageRepository,
    safari_repo: SafariOptionRepository
) -> None:
    """Insert demo villas, packages and safaris that are not already present"""
    for villa in DEMO_VILLAS:
        if not await villa_repo.find_by_id(villa.id):
            await villa_repo.save(villa.model_copy(deep=True))
    for package in DEMO_PACKAGES:
        if not await package_repo.find_by_id(package.id):
            await package_repo.save(package.model_copy(deep=True))
    for option in DEMO_SAFARI_OPTIONS:
        if not await safari_repo.find_by_id(option.id):
            await safari_repo.save(option.model_copy(deep=True))

    logger.info("Seeded %s villas, %s packages, %s safari options",
                len(DEMO_VILLAS), len(DEMO_PACKAGES), len(DEMO_SAFARI_OPTIONS))
