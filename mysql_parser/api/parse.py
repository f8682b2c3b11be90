"""
Parse REST API endpoints.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from mysql_parser.config import settings
from mysql_parser.errors import UnknownDialectError
from mysql_parser.models.api import DialectInfo, DialectListResponse, ParseRequest
from mysql_parser.plugins.manager import get_plugin_manager
from mysql_parser.service import get_envelope_builder
from mysql_parser.utils.logging import get_logger, log_error_with_context

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["parse"])


@router.post("/parse")
async def parse(request: ParseRequest) -> JSONResponse:
    """
    Parse SQL text into an Envelope.

    Syntax errors are not HTTP errors: they come back as a 200 response
    holding a failed Envelope.

    Args:
        request: SQL text and optional dialect

    Returns:
        Envelope JSON with default-valued fields omitted

    Raises:
        HTTPException: 404 if the dialect is unknown
    """
    dialect = request.dialect or settings.default_dialect
    request_logger = logger.with_context(dialect=dialect)

    try:
        builder = get_envelope_builder(dialect)
    except UnknownDialectError as e:
        request_logger.warning(f"Parse request for unknown dialect: {e}")
        raise HTTPException(status_code=404, detail=str(e))

    request_logger.info("Parse request received", extra={"sql_length": len(request.sql)})

    try:
        envelope = builder.build(request.sql)
    except Exception as e:
        log_error_with_context(request_logger, "Error building envelope", e, sql_length=len(request.sql))
        raise HTTPException(status_code=500, detail="Internal server error")

    return JSONResponse(content=envelope.to_dict())


@router.get("/dialects", response_model=DialectListResponse)
async def list_dialects() -> DialectListResponse:
    """
    List registered dialect plugins.

    Returns:
        Dialects with their versions and aliases, plus manager statistics
    """
    manager = get_plugin_manager()
    dialects = []
    for name in manager.list_supported_dialects():
        plugin = manager.get_plugin(name)
        dialects.append(
            DialectInfo(name=name, version=plugin.version, aliases=list(plugin.aliases))
        )

    statistics = manager.get_statistics()
    return DialectListResponse(
        default_dialect=settings.default_dialect,
        dialects=dialects,
        statistics={
            "total_plugins": statistics["total_plugins"],
            "total_aliases": statistics["total_aliases"],
        },
    )
