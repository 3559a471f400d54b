# app/schemas/stats.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class AdminDashboardStats(SQLModel):
    """
    Counters shown on the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    available_products: int
    total_categories: int
    total_customers: int
