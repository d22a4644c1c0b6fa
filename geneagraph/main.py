from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

# Routers
from geneagraph.api.routers.core import router as core_router
from geneagraph.api.routers.graph import router as graph_router
from geneagraph.api.routers.search import router as search_router


app = FastAPI(title="geneagraph", version="0.1")

# Graph payloads are large and repetitive
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(core_router)
app.include_router(graph_router)
app.include_router(search_router)
