# Routers package
from .imports import router as imports_router
from .properties import router as properties_router
from .catalogue import router as catalogue_router
from .uploads import router as uploads_router
