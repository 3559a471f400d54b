# app/services/stats_service.py
from sqlmodel import Session

from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import AdminDashboardStats


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(self, session: Session) -> AdminDashboardStats:
        return AdminDashboardStats(
            total_products=self.repo.count_products(session),
            available_products=self.repo.count_products(session, only_available=True),
            total_categories=self.repo.count_categories(session),
            total_customers=self.repo.count_customers(session),
        )
