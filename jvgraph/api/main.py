"""
FastAPI Application

HTTP surface of a graph viewer session, consumed by the browser frontend.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import logging

from config.settings import get_settings
from ..graph.schema import Hit
from ..graph.selection import InspectionView
from ..traversal.state import TraversalMode, MIN_DEPTH, MAX_DEPTH
from ..viewer import GraphViewer

# Setup logging
logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="JIVAS Graph Explorer API",
    description="Incremental exploration of a remote JIVAS graph",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global viewer session
viewer: Optional[GraphViewer] = None


# ====================
# Request/Response Models
# ====================

class ModeRequest(BaseModel):
    mode: TraversalMode


class DepthRequest(BaseModel):
    depth: int = Field(..., ge=MIN_DEPTH, le=MAX_DEPTH)


class ViewRequest(BaseModel):
    view: InspectionView = InspectionView.TABLE


class GraphResponse(BaseModel):
    traversal: Dict[str, Any]
    graph: Dict[str, Any]
    selection: Dict[str, Any]


# ====================
# Startup/Shutdown
# ====================

@app.on_event("startup")
async def startup():
    """Open a viewer session against the configured server"""
    global viewer

    settings = get_settings()

    logger.info("Starting JIVAS Graph Explorer API...")

    if not settings.root_node:
        logger.warning("ROOT_NODE not configured; API running without a session")
        return

    viewer = GraphViewer.from_settings(settings)
    await viewer.open()
    logger.info(f"✓ Viewer session open on root {settings.root_node}")


@app.on_event("shutdown")
async def shutdown():
    """Cleanup on shutdown"""
    global viewer

    if viewer is not None:
        await viewer.close()
        viewer = None
        logger.info("Closed viewer session")


def _session() -> GraphViewer:
    if viewer is None:
        raise HTTPException(status_code=503, detail="No viewer session")
    return viewer


def _snapshot(session: GraphViewer) -> GraphResponse:
    return GraphResponse(
        traversal=session.traversal_info(),
        graph=session.surface.export(),
        selection=session.selection_info(),
    )


# ====================
# API Endpoints
# ====================

@app.get("/")
async def root():
    """API root"""
    return {
        "name": "JIVAS Graph Explorer API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check"""
    return {
        "status": "healthy",
        "session_open": viewer is not None,
        "last_error": viewer.controller.last_error if viewer else None,
    }


@app.get("/api/graph", response_model=GraphResponse)
async def get_graph():
    """
    Current graph in vis-network shape, plus traversal and selection state.
    """
    return _snapshot(_session())


@app.get("/api/graph/stats")
async def get_graph_stats():
    """Counts of what has been discovered so far"""
    return _session().store.stats()


@app.post("/api/traversal/mode", response_model=GraphResponse)
async def set_mode(request: ModeRequest):
    """Switch traversal mode; the graph starts over from the root"""
    session = _session()
    await session.set_mode(request.mode)
    return _snapshot(session)


@app.post("/api/traversal/depth", response_model=GraphResponse)
async def set_depth(request: DepthRequest):
    """Neighborhood depth (Step/Focus only)"""
    session = _session()
    await session.set_depth(request.depth)
    return _snapshot(session)


@app.post("/api/traversal/reset", response_model=GraphResponse)
async def reset_graph():
    """Reset Graph button"""
    session = _session()
    await session.reset()
    return _snapshot(session)


@app.post("/api/traversal/refresh", response_model=GraphResponse)
async def refresh_graph():
    """Refetch the current fragment"""
    session = _session()
    await session.refresh()
    return _snapshot(session)


@app.post("/api/events/click", response_model=GraphResponse)
async def click(hit: Hit):
    session = _session()
    session.click(hit)
    return _snapshot(session)


@app.post("/api/events/double-click", response_model=GraphResponse)
async def double_click(hit: Hit):
    session = _session()
    await session.double_click(hit)
    return _snapshot(session)


@app.post("/api/events/context", response_model=GraphResponse)
async def context_click(hit: Hit):
    session = _session()
    session.context_click(hit)
    return _snapshot(session)


@app.get("/api/selection")
async def get_selection(view: Optional[InspectionView] = None):
    """
    Object information for the selected node or edge.
    """
    session = _session()
    if view is not None:
        session.set_view(view)
    return session.selection_info()


@app.post("/api/selection/view")
async def set_selection_view(request: ViewRequest):
    session = _session()
    session.set_view(request.view)
    return session.selection_info()


@app.post("/api/selection/close")
async def close_panel():
    session = _session()
    session.close_panel()
    return session.selection_info()


@app.get("/api/surface/commands")
async def surface_commands() -> Dict[str, List[str]]:
    """Pending view commands (fit, clear) for the frontend to run"""
    return {"commands": _session().surface.drain_commands()}
