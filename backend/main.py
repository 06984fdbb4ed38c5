"""
Backend API - SGIP Real Estate
Property catalogue and bulk folder import
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(title="SGIP Real Estate API", version="1.0.0")

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Inicializar base de datos al arrancar
from config.db_connection import init_db
init_db()
logger.info("Database tables initialized")

# Importar routers
from routers.imports import router as imports_router
from routers.properties import router as properties_router
from routers.catalogue import router as catalogue_router
from routers.uploads import router as uploads_router, build_upload_service

# Registrar routers; imports goes first so /api/properties/browse-folders
# is not captured by /api/properties/{property_id}
app.include_router(imports_router)
app.include_router(properties_router)
app.include_router(catalogue_router)
app.include_router(uploads_router)

app.state.upload_service = build_upload_service()

from services.clock import get_local_now


@app.get("/")
async def root():
    """Endpoint raíz"""
    return {"message": "SGIP Real Estate API is running", "timestamp": get_local_now(), "version": "1.0.0"}


@app.get("/health")
async def health():
    """Endpoint de healthcheck para Docker"""
    return {"status": "healthy", "timestamp": get_local_now()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
