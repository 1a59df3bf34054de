"""
API routes for the financial calculators.
"""

from fastapi import APIRouter

from bizcalc.api import calculations

router = APIRouter()

router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
