from __future__ import annotations

from flask import Flask

from ..common.web import current_role, current_user_id, login_required, ok, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    dashboard = container.dashboard_service

    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard_index():
        me = container.user_service.get(current_user_id())
        return ok(role=me.role.value, stats=dashboard.stats_for(me))

    @app.route("/api/dashboard/workers", endpoint="worker_performance")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def worker_performance():
        return ok(workers=dashboard.worker_performance(current_role=current_role()))

    @app.route("/api/dashboard/overview", endpoint="admin_overview")
    @roles_required(Role.ADMIN)
    def admin_overview():
        return ok(overview=dashboard.admin_overview(current_role=current_role()))
