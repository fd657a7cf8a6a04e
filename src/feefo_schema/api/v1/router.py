# src/feefo_schema/api/v1/router.py
from fastapi import APIRouter

from feefo_schema.api.v1 import datalayer, refresh

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(datalayer.router)
api_router.include_router(refresh.router)
