from fastapi import APIRouter, Depends
from config.context import AppContext, get_context

router = APIRouter(tags=["System"])


@router.get("/")
async def root():
    return {"message": "API running successfully"}


@router.get("/health")
async def health(ctx: AppContext = Depends(get_context)):
    return {"status": "ok", "database": ctx.connection.status()}
