"""WSGI front end serving the exposition text."""

from __future__ import annotations

from typing import Any, Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, make_server

from loguru import logger
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

StartResponse = Callable[..., Any]
WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]


def _http_response(
    start_response: StartResponse, status: str, headers: list[tuple[str, str]], body: bytes
) -> list[bytes]:
    start_response(status, headers + [("Content-Length", str(len(body)))])
    return [body]


def make_app(registry: CollectorRegistry, metrics_path: str = "/metrics") -> WSGIApp:
    """Build the exporter's WSGI application.

    ``metrics_path`` serves the registry, ``/`` redirects there permanently,
    every other path is a 404.
    """

    def app(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        path = environ.get("PATH_INFO", "/") or "/"

        if path == metrics_path:
            try:
                output = generate_latest(registry)
            except Exception as e:
                logger.exception("Rendering metrics failed")
                return _http_response(
                    start_response,
                    "500 Internal Server Error",
                    [("Content-Type", "text/plain; charset=utf-8")],
                    f"scrape failed: {e}\n".encode("utf-8"),
                )
            return _http_response(start_response, "200 OK", [("Content-Type", CONTENT_TYPE_LATEST)], output)

        if path == "/":
            return _http_response(
                start_response,
                "301 Moved Permanently",
                [("Location", metrics_path), ("Content-Type", "text/plain; charset=utf-8")],
                f"see {metrics_path}\n".encode("utf-8"),
            )

        return _http_response(
            start_response,
            "404 Not Found",
            [("Content-Type", "text/plain; charset=utf-8")],
            b"not found\n",
        )

    return app


class _LoguruRequestHandler(WSGIRequestHandler):
    """Route wsgiref's access log through loguru instead of stderr."""

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug(f"{self.address_string()} - {format % args}")


def serve(app: WSGIApp, host: str, port: int) -> None:
    """Serve ``app`` on ``host:port`` until interrupted."""
    with make_server(host, port, app, handler_class=_LoguruRequestHandler) as httpd:
        logger.info(f"Listening on {host or '0.0.0.0'}:{port}")
        httpd.serve_forever()
