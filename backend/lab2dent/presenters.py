"""Turn domain records into API response schemas."""
from .models import Order, User
from .schemas import (
    AdminOverviewResponse,
    AnalyticsResponse,
    MonthlyRevenue,
    MonthlyVolume,
    OrderProgressResponse,
    OrderResponse,
    ProgressStepResponse,
    UserResponse,
)
from .services.analytics import Analytics
from .services.status_progression import OrderProgress
from .use_cases.admin_view import AdminOverview


def order_response(order: Order) -> OrderResponse:
    return OrderResponse.model_validate(order)


def user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


def progress_response(progress: OrderProgress) -> OrderProgressResponse:
    return OrderProgressResponse(
        order_id=progress.order_id,
        order_number=progress.order_number,
        current_status=progress.current_status,
        caption=progress.caption,
        is_terminal=progress.is_terminal,
        is_overdue=progress.is_overdue,
        steps=[
            ProgressStepResponse(index=step.index, status=step.status, label=step.label, state=step.state.value)
            for step in progress.steps
        ],
    )


def analytics_response(analytics: Analytics) -> AnalyticsResponse:
    return AnalyticsResponse(
        total_orders=analytics.total_orders,
        active_orders=analytics.active_orders,
        completed_orders=analytics.completed_orders,
        total_revenue=analytics.total_revenue,
        average_completion_time=analytics.average_completion_time,
        orders_by_status=analytics.orders_by_status,
        orders_by_priority=analytics.orders_by_priority,
        orders_by_lab=analytics.orders_by_lab,
        orders_by_clinic=analytics.orders_by_clinic,
        monthly_order_volume=[MonthlyVolume(**row) for row in analytics.monthly_order_volume],
        revenue_by_month=[MonthlyRevenue(**row) for row in analytics.revenue_by_month],
    )


def overview_response(overview: AdminOverview) -> AdminOverviewResponse:
    return AdminOverviewResponse(
        total_orders=overview.total_orders,
        active_orders=overview.active_orders,
        overdue_orders=overview.overdue_orders,
        total_clinics=overview.total_clinics,
        total_labs=overview.total_labs,
        total_users=overview.total_users,
        active_users=overview.active_users,
        labs=overview.labs,
        recent_orders=[order_response(order) for order in overview.recent_orders],
    )
