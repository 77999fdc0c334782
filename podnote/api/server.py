"""FastAPI server exposing the command gateway."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from podnote.config import Config, load_config
from podnote.factory import Services, create_services
from podnote.utils import get_logger

logger = get_logger(__name__)


class CommandRequest(BaseModel):
    """One gateway command line."""
    command: str


class CommandResponse(BaseModel):
    output: str
    is_error: bool
    kind: str | None = None


class ShellRequest(BaseModel):
    """Batch of gateway commands, as sent by the agent's shell tool."""
    commands: list[str]


class ShellOutput(BaseModel):
    stdout: str
    stderr: str
    exit_code: int


class ShellResponse(BaseModel):
    output: list[ShellOutput]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    storage: str


class SkillsResponse(BaseModel):
    index: str


class ToolCallResponse(BaseModel):
    """Result dict returned by the tool executor."""
    success: bool
    output: Any = None
    error: str | None = None


class InstructionsResponse(BaseModel):
    instructions: str


def _services(request: Request) -> Services:
    return request.app.state.services


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", version="0.1.0", storage=_services(request).fs.backend_name)


@router.post("/command", response_model=CommandResponse)
async def run_command(body: CommandRequest, request: Request) -> CommandResponse:
    """Run a single gateway command."""
    result = await _services(request).gateway.execute(body.command)
    logger.info(
        "Command executed",
        extra={"success": result.success, "kind": result.kind.value if result.kind else None},
    )
    return CommandResponse(
        output=result.render(),
        is_error=not result.success,
        kind=result.kind.value if result.kind else None,
    )


@router.post("/shell", response_model=ShellResponse)
async def run_shell(body: ShellRequest, request: Request) -> ShellResponse:
    """Run commands through the agent's shell tool."""
    skill = _services(request).loader.get_skill_for_tool("shell")
    outputs: list[dict[str, Any]] = await skill.run_commands(body.commands)
    return ShellResponse(output=[ShellOutput(**o) for o in outputs])


@router.get("/skills", response_model=SkillsResponse)
async def skill_index(request: Request) -> SkillsResponse:
    """Prompt block listing committed skills."""
    return SkillsResponse(index=await _services(request).skills.skill_index())


@router.get("/tools")
async def list_tools(request: Request) -> list[dict[str, Any]]:
    """Tool definitions in OpenAI function-calling format."""
    return _services(request).tools.get_tool_definitions()


@router.post("/tools/{name}", response_model=ToolCallResponse)
async def call_tool(
    name: str,
    request: Request,
    arguments: dict[str, Any] = Body(...),
) -> ToolCallResponse:
    """Run one agent tool call; failures come back with success=false."""
    return ToolCallResponse(**await _services(request).tools.execute(name, arguments))


@router.get("/instructions", response_model=InstructionsResponse)
async def instructions(request: Request) -> InstructionsResponse:
    """Agent system prompt with the current skill index and tools."""
    return InstructionsResponse(instructions=await _services(request).instructions())


def create_app(config: Config | None = None, services: Services | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Optional configuration override; loaded from config.yaml if None
        services: Optional prebuilt services (storage, gateway, tools)

    Returns:
        Configured FastAPI app
    """
    config = config or load_config()
    services = services or create_services(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting PodNote API server", extra={"storage": services.fs.backend_name})
        yield
        logger.info("Shutting down API server")
        await services.aclose()

    app = FastAPI(
        title="PodNote API",
        description="Command gateway for Notion skills and podcast discovery",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app
