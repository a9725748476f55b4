"""HTTP transport exposing discovery, conversion, resume and reveal commands."""

from __future__ import annotations

import argparse
import importlib.util
import logging
import os
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from image_converter.api import (
    check_existing,
    convert,
    discover_report,
    reveal_in_file_manager,
)
from image_converter.errors import ConverterError, RevealError
from image_converter.infrastructure.progress import LoggingProgressSink
from image_converter.schemas import (
    CheckExistingPayload,
    ConversionResultPayload,
    ConvertPayload,
    DiscoverPayload,
    DiscoverResponse,
    ImageRecordPayload,
    RevealPayload,
    StatusResponse,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _require_http_runtime() -> None:
    """Ensure HTTP server runtime dependencies are available."""
    if importlib.util.find_spec("fastapi") is None:
        raise RuntimeError(
            "fastapi is required to run image-converter-http. Install with extra: .[server]"
        )


def _to_result_payloads(results: list[Any]) -> list[ConversionResultPayload]:
    return [ConversionResultPayload.model_validate(asdict(result)) for result in results]


def create_app() -> FastAPI:
    """Create the converter HTTP application."""
    _require_http_runtime()
    from fastapi import FastAPI, HTTPException, status

    app = FastAPI(
        title="Image Converter",
        version="0.1.0",
        description="Discover images and convert them to WebP or AVIF.",
    )

    def _bad_request(exc: ConverterError) -> HTTPException:
        code = (
            status.HTTP_404_NOT_FOUND
            if isinstance(exc, RevealError)
            else status.HTTP_400_BAD_REQUEST
        )
        return HTTPException(status_code=code, detail=str(exc))

    def _internal_error(exc: Exception, action: str) -> HTTPException:
        logger.exception("unexpected error during HTTP %s", action)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal server error",
        )

    @app.get("/healthz", response_model=StatusResponse)
    async def healthz() -> StatusResponse:
        return StatusResponse(status="ok")

    @app.get("/readyz", response_model=StatusResponse)
    async def readyz() -> StatusResponse:
        return StatusResponse(status="ready")

    @app.post("/v1/discover", response_model=DiscoverResponse)
    def discover_endpoint(payload: DiscoverPayload) -> DiscoverResponse:
        """Collect and content-check images under the given paths."""
        sink = LoggingProgressSink("discover")
        try:
            report = discover_report(payload.paths, progress=sink, strict=payload.strict)
        except ConverterError as exc:
            raise _bad_request(exc) from exc
        except Exception as exc:  # pragma: no cover
            raise _internal_error(exc, "discovery") from exc
        return DiscoverResponse(
            total=sink.announced[0] if sink.announced else 0,
            duplicates=report.duplicates,
            unsupported=report.unsupported,
            skipped_directories=[str(path) for path in report.skipped_directories],
            records=[
                ImageRecordPayload.model_validate(asdict(record))
                for record in report.records
            ],
        )

    @app.post("/v1/convert", response_model=list[ConversionResultPayload])
    def convert_endpoint(payload: ConvertPayload) -> list[ConversionResultPayload]:
        """Convert items; failed identities are absent from the response."""
        try:
            results = convert(
                payload.items,
                format=payload.options.format,
                quality=payload.options.quality,
                output_root=payload.options.output_root,
                skip_existing=payload.options.skip_existing,
                progress=LoggingProgressSink("convert"),
            )
        except ConverterError as exc:
            raise _bad_request(exc) from exc
        except Exception as exc:  # pragma: no cover
            raise _internal_error(exc, "conversion") from exc
        return _to_result_payloads(results)

    @app.post("/v1/check-existing", response_model=list[ConversionResultPayload])
    def check_existing_endpoint(
        payload: CheckExistingPayload,
    ) -> list[ConversionResultPayload]:
        """Report items whose converted output already exists."""
        try:
            results = check_existing(payload.items, payload.output_root, payload.format)
        except ConverterError as exc:
            raise _bad_request(exc) from exc
        return _to_result_payloads(results)

    @app.post("/v1/reveal", response_model=StatusResponse)
    def reveal_endpoint(payload: RevealPayload) -> StatusResponse:
        """Open a path in the host file manager."""
        try:
            reveal_in_file_manager(payload.path)
        except ConverterError as exc:
            raise _bad_request(exc) from exc
        return StatusResponse(status="ok")

    return app


if TYPE_CHECKING:
    app: FastAPI | None

if importlib.util.find_spec("fastapi") is not None:
    app = create_app()
else:  # pragma: no cover
    app = None


def main() -> None:
    """Run the HTTP entrypoint."""
    _require_http_runtime()
    if importlib.util.find_spec("uvicorn") is None:
        raise RuntimeError("uvicorn is required to run image-converter-http")
    import uvicorn

    parser = argparse.ArgumentParser(description="Image converter HTTP server.")
    parser.add_argument(
        "--host",
        default=os.getenv("CONVERTER_HTTP_HOST", "127.0.0.1"),
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("CONVERTER_HTTP_PORT", "8090")),
    )
    args = parser.parse_args()
    uvicorn.run(
        "image_converter.server.http_server:app",
        host=args.host,
        port=args.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
