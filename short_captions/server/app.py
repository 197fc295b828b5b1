"""FastAPI application exposing the caption engine over HTTP.

WHY: The web editor previews captions in the browser and asks the
server for the cue files the compositor burns in. Both renderers must
get their timings from one engine run, so the editor posts the
transcript and style once and receives every format from the same
chunk list.

HOW: A single FastAPI app exposes 4 endpoints grouped by tags. POST
/captions builds one CaptionTrack and runs each requested emitter over
it. POST /captions/{format_key} returns one format as a raw file
download. GET /formats and GET /health are for discovery and health checks.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- Rendering is synchronous and stateless; no request affects another
- Engine failures are logged with the traceback and reported as 500
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from short_captions import __version__
from short_captions.core.ir import CaptionTrack, Overlay
from short_captions.core.pipeline import build_track
from short_captions.emitters import EMITTERS
from short_captions.emitters.base import EmitterOutput
from short_captions.server.models import (
    CaptionRequest,
    CaptionResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    OutputFormat,
    RenderedFile,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Short Captions API",
    description=(
        "REST API turning word-level transcripts into synchronized captions "
        "for vertical short-form video: frame props for the browser preview, "
        "ASS cue files for burn-in, and SRT. All formats of one request are "
        "rendered from the same caption pages."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _track_from_request(request: CaptionRequest) -> CaptionTrack:
    overlay = Overlay(
        top_title=request.top_title,
        part_number=request.part_number,
        duration_s=request.duration_s,
    )
    return build_track(
        request.transcript, style=request.style, overlay=overlay,
        clip_start=request.clip_start, clip_end=request.clip_end,
    )


def _render(track: CaptionTrack, format_key: str) -> List[EmitterOutput]:
    """Run one emitter, translating engine failures into a 500."""
    emitter = EMITTERS[format_key]()
    try:
        return emitter.emit(track)
    except Exception as exc:
        logger.exception("Emitter %s failed", format_key)
        raise HTTPException(
            status_code=500,
            detail="Failed to render {}: {}".format(format_key, exc),
        ) from exc


# ---------------------------------------------------------------------------
# Endpoints: Captions
# ---------------------------------------------------------------------------


@app.post(
    "/captions",
    response_model=CaptionResponse,
    tags=["captions"],
    summary="Render caption files for a transcript",
    description=(
        "Segment the transcript into caption pages and render every requested "
        "format from the same pages. Unknown style values fall back to "
        "defaults. An empty transcript yields zero pages and no caption files."
    ),
    responses={
        500: {"model": ErrorResponse, "description": "Caption rendering failed"},
    },
)
async def render_captions(request: CaptionRequest) -> CaptionResponse:
    formats = request.formats or [OutputFormat(key) for key in EMITTERS]
    track = _track_from_request(request)

    files: List[RenderedFile] = []
    for fmt in formats:
        for output in _render(track, fmt.value):
            files.append(RenderedFile(
                format=fmt,
                suffix=output.suffix,
                media_type=output.media_type,
                content=output.content,
            ))

    logger.info("Rendered %d pages into %d files", len(track.chunks), len(files))
    return CaptionResponse(
        chunk_count=len(track.chunks),
        word_count=sum(len(c.words) for c in track.chunks),
        duration_s=track.duration_s,
        files=files,
    )


@app.post(
    "/captions/{format_key}",
    tags=["captions"],
    summary="Render a single caption file",
    description=(
        "Render one format and return it as a file download. Responds with "
        "204 when the transcript produces no captions and no overlay."
    ),
    responses={
        200: {"description": "Caption file content"},
        204: {"description": "Nothing to render"},
        404: {"model": ErrorResponse, "description": "Unknown format"},
        500: {"model": ErrorResponse, "description": "Caption rendering failed"},
    },
)
async def render_caption_file(format_key: str, request: CaptionRequest) -> Response:
    if format_key not in EMITTERS:
        raise HTTPException(
            status_code=404,
            detail="Unknown format '{}'. Available formats: {}".format(
                format_key, ", ".join(sorted(EMITTERS.keys())),
            ),
        )

    outputs = _render(_track_from_request(request), format_key)
    if not outputs:
        return Response(status_code=204)

    output = outputs[0]
    filename = "captions{}".format(output.suffix)
    return Response(
        content=output.content.encode("utf-8"),
        media_type=output.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description=(
        "Returns all supported output formats with their identifiers, "
        "human-readable names, file suffixes, and media types."
    ),
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, emitter_cls in sorted(EMITTERS.items()):
        emitter = emitter_cls()
        result.append(FormatInfo(
            key=key,
            name=emitter.name,
            suffix=emitter.suffix,
            media_type=emitter.media_type,
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the short-captions-api console script."""
    import uvicorn

    from short_captions.config import LOG_LEVEL

    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.WARNING))
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run_api()
