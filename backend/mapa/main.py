from fastapi import FastAPI
from mapa.core.config import settings
from mapa.routes.map_route import router as map_router
from mapa.routes.lookup_route import router as lookup_router

app = FastAPI(title="Mapa de Zonas")
app.include_router(map_router)
app.include_router(lookup_router)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Mapa de Zonas API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "sessions": "/sessions",
            "geocode": "/geocode",
            "points": "/points",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Mapa de Zonas"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mapa.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=True)
