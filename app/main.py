"""
Punto de entrada principal de la aplicación.
Configura y ejecuta el servidor web con FastAPI.
"""
import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.infrastructure.config.config.settings import LOG_LEVEL, LOG_FILE
from app.domain.entities.models import BookingFlowError, ErrorResult
from app.presentation.booking.routes import router as booking_router

# Configuración de logging con nivel configurable
numeric_level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if LOG_FILE:
    handlers.append(logging.FileHandler(LOG_FILE))
logging.basicConfig(
    level=numeric_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=handlers
)

logger = logging.getLogger(__name__)

# Crear la aplicación FastAPI con metadatos
app = FastAPI(
    title="Agendamiento de Citas",
    description="Flujo de agendamiento de citas: datos de contacto, selección de horario y confirmación",
    version="1.0.0",
    root_path=os.getenv("ROOT_PATH", ""),  # Para configuración de subdominios o rutas base
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "booking", "description": "Pasos del flujo de agendamiento"},
        {"name": "health", "description": "Verificaciones de estado del sistema"}
    ]
)

# Configurar CORS con orígenes específicos desde variables de entorno
origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Registrar los routers
app.include_router(booking_router)

@app.exception_handler(BookingFlowError)
async def booking_flow_exception_handler(request: Request, exc: BookingFlowError):
    """Errores del flujo: operación fuera de paso, horario inexistente, etc."""
    logger.warning(f"{type(exc).__name__} en {request.url.path}: {str(exc)}")
    content: ErrorResult = {"error": type(exc).__name__, "details": str(exc)}
    return JSONResponse(status_code=exc.status_code, content=content)

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    content: ErrorResult = {"error": "Solicitud inválida", "details": str(exc)}
    return JSONResponse(status_code=400, content=content)

# Manejador global de excepciones
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Manejador global de excepciones."""
    logger.exception(f"Error no manejado: {str(exc)}")
    content: ErrorResult = {"error": "Error interno del servidor", "details": None}
    return JSONResponse(status_code=500, content=content)

@app.get("/", tags=["health"])
async def root():
    """Endpoint principal para verificar que el servidor está funcionando."""
    return {
        "message": "Agendamiento de Citas",
        "docs": "/docs",
        "status": "online"
    }

# Esta variable 'app' será utilizada por Gunicorn
