"""Seed the in-memory stores with demo data."""
import logging
from datetime import date, datetime, timezone

from .auth import hash_password
from .models import (
    Carrier,
    Order,
    OrderPriority,
    OrderStatus,
    ProductionPhoto,
    ProstheticType,
    StatusUpdate,
    User,
    UserRole,
)
from .services.order_store import OrderStore
from .services.user_store import DEFAULT_PERMISSIONS, UserStore

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "test123"


def _at(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def _history(*entries: tuple[OrderStatus, str, str]) -> tuple[StatusUpdate, ...]:
    return tuple(StatusUpdate(status=status, timestamp=_at(ts), notes=notes) for status, ts, notes in entries)


def sample_orders() -> list[Order]:
    return [
        Order(
            id="1",
            order_number="ORD-2024-001",
            patient_name="John Smith",
            prosthetic_type=ProstheticType.CROWN,
            special_instructions="Patient prefers natural shade A2, high bite strength required",
            status=OrderStatus.IN_PRODUCTION,
            clinic_name="Downtown Dental",
            created_at=_at("2025-06-01"),
            updated_at=_at("2025-06-02"),
            due_date=date(2025, 9, 5),
            priority=OrderPriority.NORMAL,
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-03", "Order received and preparation started"),
                (OrderStatus.IN_PRODUCTION, "2025-06-08", "Crown fabrication in progress"),
            ),
        ),
        Order(
            id="2",
            order_number="ORD-2024-002",
            patient_name="Sarah Johnson",
            prosthetic_type=ProstheticType.DENTURES,
            special_instructions="Complete upper denture, patient has sensitive gums",
            status=OrderStatus.PREPARATION,
            clinic_name="Westside Family Dental",
            created_at=_at("2025-06-06"),
            updated_at=_at("2025-06-06"),
            due_date=date(2025, 8, 8),
            priority=OrderPriority.HIGH,
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-10", "Order received, reviewing requirements"),
            ),
        ),
        Order(
            id="3",
            order_number="ORD-2024-003",
            patient_name="Michael Brown",
            prosthetic_type=ProstheticType.BRIDGE,
            special_instructions="3-unit bridge, molars 14-16, shade B3",
            status=OrderStatus.POST_PRODUCTION,
            clinic_name="Smile Center",
            created_at=_at("2025-06-10"),
            updated_at=_at("2025-06-11"),
            due_date=date(2025, 12, 2),
            priority=OrderPriority.NORMAL,
            estimated_completion_time=date(2025, 8, 2),
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-13", "Order received and preparation started"),
                (OrderStatus.IN_PRODUCTION, "2025-06-14", "Bridge fabrication in progress"),
                (OrderStatus.POST_PRODUCTION, "2025-06-18", "Final polishing and quality control"),
            ),
        ),
        Order(
            id="4",
            order_number="ORD-2024-004",
            patient_name="Emily Davis",
            prosthetic_type=ProstheticType.VENEER,
            special_instructions="Upper anterior 6 veneers, Hollywood white preferred",
            status=OrderStatus.READY_FOR_SHIPPING,
            clinic_name="Elite Dental Care",
            created_at=_at("2025-06-18"),
            updated_at=_at("2025-06-18"),
            due_date=date(2025, 12, 31),
            priority=OrderPriority.URGENT,
            estimated_completion_time=date(2025, 12, 31),
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-18", "Order received and preparation started"),
                (OrderStatus.IN_PRODUCTION, "2025-06-20", "Veneer fabrication in progress"),
                (OrderStatus.POST_PRODUCTION, "2025-06-28", "Final shaping and color matching"),
                (OrderStatus.READY_FOR_SHIPPING, "2025-06-30", "Quality control passed, ready for shipping"),
            ),
        ),
        Order(
            id="5",
            order_number="ORD-2024-005",
            patient_name="Robert Wilson",
            prosthetic_type=ProstheticType.IMPLANT,
            special_instructions="Single implant crown, titanium base, tooth #30",
            status=OrderStatus.SHIPPED,
            clinic_name="Downtown Dental",
            created_at=_at("2025-06-15"),
            updated_at=_at("2025-06-29"),
            due_date=date(2025, 6, 28),
            tracking_number="1Z999AA1234567890",
            carrier=Carrier.UPS,
            priority=OrderPriority.NORMAL,
            estimated_completion_time=date(2025, 12, 28),
            production_photos=(
                ProductionPhoto(
                    id="1",
                    stage=OrderStatus.IN_PRODUCTION,
                    url="/api/placeholder-image",
                    caption="Implant crown progress",
                    uploaded_at=_at("2025-06-18"),
                ),
            ),
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-20", "Order received and preparation started"),
                (OrderStatus.IN_PRODUCTION, "2025-06-27", "Implant crown fabrication in progress"),
                (OrderStatus.POST_PRODUCTION, "2025-06-26", "Final fitting and quality control"),
                (OrderStatus.READY_FOR_SHIPPING, "2025-06-28", "Packaged and ready for shipping"),
                (OrderStatus.SHIPPED, "2025-06-30", "Package shipped via UPS"),
            ),
        ),
        Order(
            id="6",
            order_number="ORD-2024-006",
            patient_name="Lisa Anderson",
            prosthetic_type=ProstheticType.PARTIAL_DENTURE,
            special_instructions="Lower partial, flexible base material requested",
            status=OrderStatus.DELIVERED,
            clinic_name="Healthy Smiles Clinic",
            created_at=_at("2025-06-10"),
            updated_at=_at("2025-06-27"),
            due_date=date(2025, 12, 25),
            tracking_number="1Z999AA0987654321",
            carrier=Carrier.UPS,
            priority=OrderPriority.LOW,
            estimated_completion_time=date(2025, 12, 25),
            production_photos=(
                ProductionPhoto(
                    id="2",
                    stage=OrderStatus.POST_PRODUCTION,
                    url="/api/placeholder-image",
                    caption="Final polishing complete",
                    uploaded_at=_at("2025-06-20"),
                ),
            ),
            status_history=_history(
                (OrderStatus.PREPARATION, "2025-06-22", "Order received and preparation started"),
                (OrderStatus.IN_PRODUCTION, "2025-06-23", "Partial denture fabrication in progress"),
                (OrderStatus.POST_PRODUCTION, "2025-06-25", "Final adjustments and polishing"),
                (OrderStatus.READY_FOR_SHIPPING, "2025-06-30", "Quality control passed, ready for shipping"),
                (OrderStatus.SHIPPED, "2025-07-02", "Package shipped via UPS"),
                (OrderStatus.DELIVERED, "2025-07-05", "Package delivered successfully"),
            ),
        ),
    ]


def sample_users() -> list[User]:
    users_data = [
        ("1", "admin@lab2dent.com", "System Administrator", UserRole.ADMIN, "LAB2DENT System", True, "2024-01-01", "2024-12-30", None),
        ("2", "contact@downtown-dental.com", "Dr. Sarah Johnson", UserRole.CLINIC, "Downtown Dental", True, "2024-02-15", "2024-12-29", None),
        ("3", "lab@westside-family.com", "Dr. Michael Chen", UserRole.CLINIC, "Westside Family Dental", True, "2024-03-10", "2024-12-28", None),
        ("4", "production@premium-lab.com", "Premium Dental Lab", UserRole.LAB, "Premium Dental Lab", True, "2024-01-20", "2024-12-30", None),
        ("5", "info@techlab-solutions.com", "TechLab Solutions", UserRole.LAB, "TechLab Solutions", True, "2024-02-01", "2024-12-29", None),
        ("6", "contact@smile-center.com", "Dr. Emily Davis", UserRole.CLINIC, "Smile Center", True, "2024-04-05", "2024-12-27", ("view_orders", "create_orders")),
        ("7", "orders@elite-dental.com", "Dr. Robert Wilson", UserRole.CLINIC, "Elite Dental Care", False, "2024-05-12", "2024-11-15", ("view_orders", "create_orders")),
        ("8", "lab@healthy-smiles.com", "Dr. Lisa Anderson", UserRole.CLINIC, "Healthy Smiles Clinic", True, "2024-06-18", "2024-12-26", None),
    ]
    return [
        User(
            id=user_id,
            email=email,
            name=name,
            role=role,
            organization_name=organization,
            is_active=is_active,
            created_at=_at(created),
            last_login=_at(last_login),
            permissions=permissions or DEFAULT_PERMISSIONS[role],
        )
        for user_id, email, name, role, organization, is_active, created, last_login, permissions in users_data
    ]


def demo_accounts() -> list[User]:
    """Login accounts shown on the sign-in page (password ``test123``)."""
    password_hash = hash_password(DEMO_PASSWORD)
    created = _at("2024-01-01")
    accounts = [
        ("demo-clinic", "clinic@test.com", "Clinic User", UserRole.CLINIC, "Downtown Dental"),
        ("demo-lab", "lab@test.com", "Lab User", UserRole.LAB, "Premium Dental Lab"),
        ("demo-admin", "admin@test.com", "Admin User", UserRole.ADMIN, "LAB2DENT System"),
    ]
    return [
        User(
            id=user_id,
            email=email,
            name=name,
            role=role,
            organization_name=organization,
            is_active=True,
            created_at=created,
            permissions=DEFAULT_PERMISSIONS[role],
            password_hash=password_hash,
        )
        for user_id, email, name, role, organization in accounts
    ]


def seed(order_store: OrderStore, user_store: UserStore, *, include_samples: bool = True) -> None:
    """Load demo login accounts, plus the sample orders and users when requested."""
    user_store.load(demo_accounts())
    if include_samples:
        order_store.load(sample_orders())
        user_store.load(sample_users())
    logger.info("Seeded %d orders and %d users", len(order_store), len(user_store))
