"""
GeoTest API
===========

FastAPI surface over the analysis engine: full GEO reports, raw
consensus, provider status and a server-sent-events stream of provider
progress.
"""
import asyncio
import logging
from typing import AsyncGenerator, Callable, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sse_starlette.sse import EventSourceResponse

from geotest import __version__
from geotest.analysis.orchestrator import AnalysisOrchestrator
from geotest.analysis.report import GeoAnalyzer
from geotest.api.api_schemas import AnalyzeRequest, HealthResponse, StreamChunk
from geotest.core.cache import ResponseCache
from geotest.core.config import AIConfig
from geotest.core.credentials import check_production_readiness, get_ai_status
from geotest.core.errors import ConsensusError, InvalidURLError
from geotest.core.logger import setup_logging
from geotest.core.progress import ProgressCallback
from geotest.core.validation import validate_url

logger = logging.getLogger(__name__)

AnalyzerFactory = Callable[[Optional[ProgressCallback]], GeoAnalyzer]


def _chunk(type_: str, content: str = "", metadata: Optional[dict] = None) -> str:
    return StreamChunk(type=type_, content=content, metadata=metadata).model_dump_json()


async def stream_events(analyzer_factory: AnalyzerFactory, url: str) -> AsyncGenerator[str, None]:
    """
    Yield progress chunks while a report is built, then the report itself.

    Progress updates are pushed by the orchestrator's tracker into a queue
    and drained until the analysis task settles.
    """
    queue: asyncio.Queue = asyncio.Queue()

    def on_progress(provider: str, value: float):
        queue.put_nowait((provider, value))

    analyzer = analyzer_factory(on_progress)
    task = asyncio.create_task(analyzer.analyze(url))

    try:
        while not task.done():
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                provider, value = getter.result()
                yield _chunk("progress", provider, {"provider": provider, "progress": round(value, 1)})
            else:
                getter.cancel()

        while not queue.empty():
            provider, value = queue.get_nowait()
            yield _chunk("progress", provider, {"provider": provider, "progress": round(value, 1)})

        report = task.result()
        yield _chunk("report", report.url, report.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"❌ [API] Stream failed for {url}: {e}")
        yield _chunk("error", str(e))
    finally:
        if not task.done():
            task.cancel()


def create_app(
    config: Optional[AIConfig] = None,
    analyzer_factory: Optional[AnalyzerFactory] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Runtime configuration (defaults to AIConfig.from_env())
        analyzer_factory: Builds a GeoAnalyzer for an optional progress callback
    """
    config = config or AIConfig.from_env()
    cache = ResponseCache(ttl=config.cache_ttl_seconds)

    if analyzer_factory is None:
        def analyzer_factory(on_progress: Optional[ProgressCallback] = None) -> GeoAnalyzer:
            return GeoAnalyzer(
                config,
                orchestrator=AnalysisOrchestrator(config, on_progress=on_progress),
                cache=cache,
            )

    app = FastAPI(
        title="GeoTest API",
        description="Multi-provider AI consensus scoring for Generative Engine Optimization",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Service info"""
        return {
            "message": "GeoTest API",
            "version": __version__,
            "endpoints": {
                "/analyze": "POST - Full GEO report",
                "/consensus": "POST - 3-AI consensus only",
                "/stream": "POST - GEO report with streamed provider progress",
                "/status": "GET - Provider status",
                "/health": "GET - Health check",
            },
        }

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check"""
        readiness = check_production_readiness(config)
        return HealthResponse(
            status="healthy" if readiness["ready"] else "degraded",
            providers=readiness["providers"],
        )

    @app.get("/status")
    async def status():
        """Provider availability and readiness"""
        return {
            **get_ai_status(config),
            "readiness": check_production_readiness(config),
        }

    @app.post("/analyze")
    async def analyze(request: AnalyzeRequest):
        """
        Full GEO report. Falls back to a flagged static report when live
        analysis is unavailable.
        """
        try:
            report = await analyzer_factory(None).analyze(
                request.url,
                content=request.content,
                location=request.location,
                industry=request.industry,
            )
        except InvalidURLError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return report.model_dump(mode="json")

    @app.post("/consensus")
    async def consensus(request: AnalyzeRequest):
        """Raw consensus of the scoring providers; 503 if none succeeded."""
        try:
            url = validate_url(request.url)
            result = await analyzer_factory(None).orchestrator.run(
                url,
                content=request.content,
                location=request.location,
                industry=request.industry,
            )
        except InvalidURLError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ConsensusError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return result.model_dump(mode="json")

    @app.post("/stream")
    async def stream(request: AnalyzeRequest):
        """
        GEO report via Server-Sent Events

        Returns:
            EventSourceResponse with progress chunks followed by the report
        """
        try:
            url = validate_url(request.url)
        except InvalidURLError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return EventSourceResponse(stream_events(analyzer_factory, url))

    return app


if __name__ == "__main__":
    import uvicorn

    load_dotenv()
    setup_logging()

    print("\n" + "=" * 70)
    print("🚀 Starting GeoTest API...")
    print("=" * 70)
    print("\n📍 Endpoints:")
    print("   • http://localhost:8000/")
    print("   • http://localhost:8000/analyze (POST)")
    print("   • http://localhost:8000/consensus (POST)")
    print("   • http://localhost:8000/stream (POST)")
    print("   • http://localhost:8000/status")
    print("   • http://localhost:8000/health")
    print("\n" + "=" * 70)

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
