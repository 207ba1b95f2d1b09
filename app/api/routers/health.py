from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    # Liveness only: must answer even when the database is down
    return {"ok": True}
