# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0
"""WSGI server exposing read-only filesystem access (threaded backend).

This module exposes a minimal WebOb-based WSGI application, hosted with
a threaded ``wsgiref`` server under ``oslo_service``. Every GET request
is handed to the ``ReadRouter``; OPTIONS answers CORS preflights. TLS
support is configured via ``oslo_service.sslutils`` and ``oslo_config``.
"""

import os
import ssl
import threading
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIServer, make_server

from oslo_config import cfg
from oslo_log import log as logging
from oslo_service import service, sslutils
from webob import Request, Response

from .envelope import BINARY_ENCODINGS, BUFFER_ENCODING
from .router import ReadRouter
from .utils import ConfigurationError, find_available_port, make_path_resolver

LOG = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "HEAD", "OPTIONS")

fileserver_opts = [
    cfg.StrOpt(
        "host",
        default=os.environ.get("DEVFS_HOST", "127.0.0.1"),
        help="Listen address for the file server",
    ),
    cfg.IntOpt(
        "port",
        default=int(os.environ.get("DEVFS_PORT", "7070")),
        min=1,
        help="Preferred TCP listen port for the file server",
    ),
    cfg.IntOpt(
        "port_search_attempts",
        default=10,
        min=1,
        help="Number of consecutive ports to try when the preferred port is busy",
    ),
    cfg.StrOpt(
        "root_dir",
        default=os.environ.get("DEVFS_ROOT"),
        help="Directory request paths are resolved against (defaults to the "
        "current working directory)",
    ),
    cfg.StrOpt(
        "binary_encoding",
        default=BUFFER_ENCODING,
        choices=BINARY_ENCODINGS,
        help="JSON encoding of file contents",
    ),
    cfg.ListOpt(
        "cors_allowed_origins",
        default=["*"],
        help="Origins allowed to read from the file server, '*' allows any",
    ),
]

CONF = cfg.CONF
CONF.register_opts(fileserver_opts, group="fileserver")
sslutils.register_opts(CONF)


def _root_dir(conf=CONF) -> str:
    return conf.fileserver.root_dir or os.getcwd()


def _router() -> ReadRouter:
    """Build a read router from the current configuration."""
    return ReadRouter(
        make_path_resolver(_root_dir()),
        binary_encoding=CONF.fileserver.binary_encoding,
    )


def _allowed_origin(request: Request) -> str | None:
    """Return the request origin if CORS allows it."""
    origin = request.headers.get("Origin")
    if not origin:
        return None
    allowed = CONF.fileserver.cors_allowed_origins or []
    if "*" in allowed or origin in allowed:
        return origin
    return None


def _preflight(request: Request) -> Response:
    """Answer a CORS preflight request."""
    response = Response(status=204)
    if _allowed_origin(request) is not None:
        response.headers["Access-Control-Allow-Methods"] = ", ".join(ALLOWED_METHODS)
        requested = request.headers.get("Access-Control-Request-Headers")
        if requested:
            response.headers["Access-Control-Allow-Headers"] = requested
    return response


def _apply_cors(request: Request, response: Response) -> Response:
    origin = _allowed_origin(request)
    if origin is not None:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers.add("Vary", "Origin")
    return response


def _route(request: Request) -> Response:
    """Dispatch incoming requests by method."""
    if request.method == "OPTIONS":
        return _preflight(request)
    if request.method not in ("GET", "HEAD"):
        response = Response(status=405)
        response.allow = ALLOWED_METHODS
        return response
    return _router().handle(request)


def application(environ, start_response):
    """WSGI application callable."""
    request = Request(environ)
    response = _apply_cors(request, _route(request))
    return response(environ, start_response)


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """Threading-based WSGI server."""

    daemon_threads = True


class ThreadingWSGIService(service.ServiceBase):
    """Threading-based WSGI service."""

    def __init__(self, app, host: str, port: int, ssl_context: ssl.SSLContext | None):
        self._app = app
        self._host = host
        self._port = port
        self._ssl_context = ssl_context
        self._httpd = None
        self._thread = None

    def start(self):
        """Start the WSGI service."""
        self._httpd = make_server(
            self._host, self._port, self._app, server_class=ThreadingWSGIServer
        )
        if self._ssl_context is not None:
            self._httpd.socket = self._ssl_context.wrap_socket(
                self._httpd.socket, server_side=True
            )
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="devfs-fileserver", daemon=True
        )
        self._thread.start()

    def stop(self, graceful=True):
        """Stop the WSGI service."""
        if self._httpd is not None:
            self._httpd.shutdown()
            self._httpd.server_close()

    def wait(self):
        """Wait for the WSGI service to finish."""
        if self._thread is not None:
            self._thread.join()

    def reset(self, exiting=False):
        """Reset service state (no-op)."""
        return


def _ssl_context(conf) -> ssl.SSLContext | None:
    """Build a server TLS context when TLS is enabled.

    Client certificates are required only when a CA file is configured.
    """
    if not sslutils.is_enabled(conf):
        LOG.info("TLS disabled for fileserver")
        return None
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ctx.load_cert_chain(conf.ssl.cert_file, conf.ssl.key_file)
    if conf.ssl.ca_file:
        ctx.load_verify_locations(conf.ssl.ca_file)
        ctx.verify_mode = ssl.CERT_REQUIRED
        LOG.info("mTLS enabled for fileserver")
    else:
        LOG.info("TLS enabled for fileserver")
    return ctx


def build_service(conf=CONF) -> ThreadingWSGIService:
    """Validate the configuration and build the WSGI service.

    Raises ConfigurationError when the root directory does not exist or
    no port is free.
    """
    root = _root_dir(conf)
    if not os.path.isdir(root):
        raise ConfigurationError(f"root directory {root} does not exist")

    host = conf.fileserver.host
    port = find_available_port(
        host, conf.fileserver.port, conf.fileserver.port_search_attempts
    )
    if port != conf.fileserver.port:
        LOG.warning("Port %d is busy, using %d instead", conf.fileserver.port, port)
    LOG.info("Serving %s on %s:%d", os.path.abspath(root), host, port)
    return ThreadingWSGIService(application, host, port, _ssl_context(conf))


def serve(conf=CONF):
    """Run the file server until the launcher is stopped."""
    service_obj = build_service(conf)
    launcher = service.ServiceLauncher(conf)
    launcher.launch_service(service_obj, workers=1)
    launcher.wait()
