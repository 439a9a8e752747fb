"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException
from invoice_dashboard.database.connection import get_db_pool

router = APIRouter()

@router.get("/")
async def health_check():
    """Health check - reports healthy only when the database answers"""
    db_pool = get_db_pool()
    
    try:
        if not db_pool:
            raise RuntimeError("Database pool not initialized")
        async with db_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected"
        }
        
    except Exception as e:
        # Only report unhealthy for actual infrastructure issues
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")
