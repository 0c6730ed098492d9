"""Flask application serving the artist catalog pages and JSON API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from flask import Blueprint, Flask, current_app, jsonify, render_template, request
from flask_cors import CORS
from jinja2 import TemplateError
from werkzeug.exceptions import HTTPException

from . import config, seed
from .i18n import Translations, load_translations
from .models import Artist, InvalidPayload, Outcome, Result
from .services import GroupieAPIClient, UnknownResource, build_upstream_client
from .store import ArtistStore
from .utils import parse_id

logger = logging.getLogger(__name__)

EXTENSION_KEY = "groupie"

# Every method is routed to the artist handlers so unsupported ones get the
# JSON 405 body instead of a trailing-slash redirect.
ROUTED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]

STATUS_FOR_OUTCOME = {
    Outcome.OK: 200,
    Outcome.NOT_FOUND: 404,
    Outcome.INVALID: 400,
}

api = Blueprint("api", __name__, url_prefix="/api")
pages = Blueprint("pages", __name__)


def create_app(
    *,
    store: Optional[ArtistStore] = None,
    translations: Optional[Translations] = None,
    upstream: Optional[GroupieAPIClient] = None,
    settings: Optional[config.Settings] = None,
) -> Flask:
    """Build the application; collaborators not supplied are built from settings."""

    settings = settings or config.get_settings()
    if store is None:
        store = seed.build_store(settings.artists_file)
    if translations is None:
        translations = load_translations(
            settings.translations_file, default_locale=settings.default_locale
        )
    if upstream is None:
        upstream = build_upstream_client(settings)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions[EXTENSION_KEY] = {
        "store": store,
        "translations": translations,
        "upstream": upstream,
    }

    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        methods=config.CORS_METHODS,
        allow_headers=config.CORS_HEADERS,
        send_wildcard=True,
    )
    app.register_blueprint(api)
    app.register_blueprint(pages)
    app.register_error_handler(404, _api_error_handler)
    app.register_error_handler(405, _api_error_handler)
    return app


def _collaborators() -> Dict[str, Any]:
    return current_app.extensions[EXTENSION_KEY]


def _store() -> ArtistStore:
    return _collaborators()["store"]


def _translations() -> Translations:
    return _collaborators()["translations"]


def _upstream() -> GroupieAPIClient:
    return _collaborators()["upstream"]


def _error(status: int, message: str):
    return jsonify({"error": message}), status


def _respond(result: Result[Artist]):
    if not result.is_ok:
        return _error(STATUS_FOR_OUTCOME[result.outcome], result.error or result.outcome.value)
    return jsonify(result.value.to_dict())


def _read_artist() -> Result[Artist]:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return Result.invalid("invalid json")
    try:
        return Result.ok(Artist.from_payload(payload))
    except InvalidPayload:
        return Result.invalid("invalid json")


def _is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def _method_not_allowed(*allowed: str):
    response, status = _error(405, "method not allowed")
    response.headers["Allow"] = ", ".join(allowed)
    return response, status


def _api_error_handler(exc: HTTPException):
    if not _is_api_path(request.path):
        return exc
    message = "method not allowed" if exc.code == 405 else "not found"
    response, status = _error(exc.code, message)
    allowed = getattr(exc, "valid_methods", None)
    if allowed:
        response.headers["Allow"] = ", ".join(allowed)
    return response, status


# JSON API -----------------------------------------------------------------


@api.route("", methods=["GET"])
def api_index():
    return jsonify({"base": "/api", "artists": "/api/artists"})


@api.route("/health", methods=["GET"])
def health_check():
    return jsonify({
        "status": "healthy",
        "message": "Groupie Tracker API server is running",
        "artists": len(_store()),
    })


@api.route("/artists", methods=ROUTED_METHODS)
def artists_collection():
    if request.method not in ("GET", "HEAD", "POST"):
        return _method_not_allowed("GET", "POST")
    store = _store()
    if request.method != "POST":
        artists = store.list(request.args.get("name"))
        return jsonify([artist.to_dict() for artist in artists])

    parsed = _read_artist()
    if not parsed.is_ok:
        return _error(400, parsed.error)
    created = store.insert(parsed.value)
    logger.info("Created artist %d (%s)", created.id, created.name)
    return jsonify(created.to_dict()), 201


@api.route("/artists/", defaults={"raw_id": ""}, methods=ROUTED_METHODS)
@api.route("/artists/<path:raw_id>", methods=ROUTED_METHODS)
def artist_item(raw_id: str):
    artist_id = parse_id(raw_id)
    if artist_id is None:
        return _error(400, "invalid id")
    if request.method not in ("GET", "HEAD", "PUT", "DELETE"):
        return _method_not_allowed("GET", "PUT", "DELETE")
    store = _store()

    if request.method in ("GET", "HEAD"):
        return _respond(store.get(artist_id))

    if request.method == "PUT":
        parsed = _read_artist()
        if not parsed.is_ok:
            return _error(400, parsed.error)
        result = store.replace(artist_id, parsed.value)
        if result.is_ok:
            logger.info("Replaced artist %d", artist_id)
        return _respond(result)

    result = store.delete(artist_id)
    if not result.is_ok:
        return _error(STATUS_FOR_OUTCOME[result.outcome], result.error)
    logger.info("Deleted artist %d", artist_id)
    return "", 204


@api.route("/i18n", methods=["GET"])
def i18n_bundle():
    translations = _translations()
    lang = translations.resolve_request(request)
    response = jsonify({"lang": lang, "translations": translations.get_all(lang)})
    response.headers["Content-Language"] = lang
    response.set_cookie(
        config.LOCALE_COOKIE,
        lang,
        max_age=config.LOCALE_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
    )
    return response


@api.route("/external/<path:resource>", methods=["GET"])
def external_proxy(resource: str):
    try:
        payload = _upstream().fetch(resource)
    except UnknownResource:
        return _error(404, "not found")
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else 502
        return _error(404 if status == 404 else 502, "upstream error")
    except requests.RequestException:
        return _error(502, "upstream unavailable")
    except ValueError:
        return _error(502, "upstream returned invalid json")
    return jsonify(payload)


# HTML pages -----------------------------------------------------------------


def _page_context() -> Dict[str, Any]:
    translations = _translations()
    lang = translations.resolve_request(request)
    return {
        "lang": lang,
        "locales": list(translations.locales),
        "t": lambda key: translations.get(lang, key),
    }


@pages.route("/", methods=["GET"])
def home():
    return render_template("home.html", **_page_context())


@pages.route("/groupes", methods=["GET"])
def groupes():
    artists = [artist.to_dict() for artist in _store().list()]
    try:
        return render_template("index.html", artists=artists, **_page_context())
    except TemplateError as exc:
        logger.error("Could not render artist list: %s", exc)
        return "template error", 500


@pages.route("/artist", methods=["GET"])
@pages.route("/artists/<path:artist_ref>", methods=["GET"])
def artist_page(artist_ref: Optional[str] = None):
    return render_template("artist.html", artist_ref=artist_ref, **_page_context())
