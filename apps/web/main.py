"""FastAPI web application for DepClash."""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from core.errors import InvalidIdentifier, ModuleNotFound, VersionIncompatible
from core.graph import GraphBuilder
from core.provider import InstalledDistributionProvider
from core.report import ConflictReporter

logger = logging.getLogger(__name__)

app = FastAPI(
    title="DepClash",
    description="Report version conflicts and missing modules in a dependency graph",
    version="0.1.0",
)


class ReportRequest(BaseModel):
    """Request model for inspecting a root module."""
    root: str
    paths: Optional[list[str]] = None


class OccurrenceModel(BaseModel):
    identity: str
    name: str
    version: str
    status: str
    installed_version: Optional[str] = None
    path: list[str]


class MismatchModel(BaseModel):
    name: str
    versions: list[str]
    installed_versions: list[str]
    conflicting: bool
    occurrences: list[OccurrenceModel]


class MissingModel(BaseModel):
    identity: str
    name: str
    referenced_by: list[str]


class ReportResponse(BaseModel):
    """Response model for a conflict report."""
    root: str
    node_count: int
    has_problems: bool
    mismatches: list[MismatchModel]
    missing: list[MissingModel]


def _build_report(root: str, paths: Optional[list[str]] = None) -> ReportResponse:
    """Build and report the graph of a root module, mapping failures to HTTP errors."""
    try:
        root = root.strip()
        if not root:
            raise HTTPException(status_code=400, detail="No root module provided")

        provider = InstalledDistributionProvider(paths=paths)
        graph = GraphBuilder(provider).build(root)
        report = ConflictReporter(graph).build_report()

        return ReportResponse(**report.to_dict())

    except HTTPException:
        # Re-raise HTTP exceptions (don't convert to 500)
        raise
    except InvalidIdentifier as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ModuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VersionIncompatible as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("Failed to inspect %s", root)
        raise HTTPException(status_code=500, detail=f"Error inspecting dependencies: {str(e)}")


# Plain def handlers: graph building runs in the threadpool, off the event loop
@app.post("/api/report", response_model=ReportResponse)
def inspect_dependencies(request: ReportRequest):
    """Build the dependency graph of a root module and report its conflicts."""
    return _build_report(request.root, request.paths)


@app.get("/api/report/{root}", response_model=ReportResponse)
def inspect_installed(root: str):
    """Inspect a root module in the server's own environment."""
    return _build_report(root)
