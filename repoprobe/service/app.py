"""FastAPI application entrypoint for repoprobe service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Body, Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config
from ..toolbox import TOOLS, ToolResult, Toolbox


class HealthResponse(BaseModel):
    status: str
    root: str


class ToolDescription(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class ToolResponse(BaseModel):
    tool: str
    result: Any


def _default_toolbox() -> Toolbox:
    return Toolbox(load_config())


def create_app(
    toolbox_factory: Callable[[], Toolbox] = _default_toolbox,
) -> FastAPI:
    """Create the FastAPI application exposing repoprobe tools over HTTP."""

    app = FastAPI(title="repoprobe", version="0.1.0")
    toolbox = toolbox_factory()

    async def get_toolbox() -> Toolbox:
        return toolbox

    @app.get("/health", response_model=HealthResponse)
    async def health(toolbox: Toolbox = Depends(get_toolbox)) -> HealthResponse:
        return HealthResponse(status="ok", root=str(toolbox.config.root))

    @app.get("/tools", response_model=List[ToolDescription])
    async def list_tools(toolbox: Toolbox = Depends(get_toolbox)) -> List[Dict[str, Any]]:
        return toolbox.describe()

    @app.post("/tools/{name}", response_model=ToolResponse)
    async def call_tool(
        name: str,
        arguments: Optional[Dict[str, Any]] = Body(default=None),
        toolbox: Toolbox = Depends(get_toolbox),
    ) -> Any:
        if name not in TOOLS:
            return JSONResponse(status_code=404, content={"error": f"Unknown tool: {name}"})

        def _run() -> ToolResult:
            return toolbox.dispatch(name, arguments or {})

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        if not result.ok:
            return JSONResponse(status_code=400, content=result.to_dict())
        return ToolResponse(tool=name, result=result.payload)

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, toolbox: Toolbox | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: toolbox) if toolbox is not None else create_app()
    uvicorn.run(app, host=host, port=port)
