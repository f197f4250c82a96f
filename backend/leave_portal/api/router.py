from fastapi import APIRouter

from leave_portal.api.balances import balances_router, user_balances_router
from leave_portal.api.leave_types import leave_types_router
from leave_portal.api.reports import reports_router
from leave_portal.api.requests import admin_requests_router, requests_router
from leave_portal.api.users import users_router

api_router = APIRouter()
api_router.include_router(leave_types_router)
api_router.include_router(balances_router)
api_router.include_router(user_balances_router)
api_router.include_router(requests_router)
api_router.include_router(admin_requests_router)
api_router.include_router(reports_router)
api_router.include_router(users_router)
