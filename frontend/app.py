"""
Flask application for the job dashboard.

Provides the JSON API behind the dashboard UI:
- Cursor-paginated job listing with filter and sort
- Save / archive / read / applied toggles
- Bulk archive by filter
- Shared-secret session authentication for mutations
- Health check

Stack: Flask + pymongo + pydantic
"""

import hmac
import os
import uuid
from functools import wraps
from typing import Optional

from flask import Flask, g, jsonify, request, session
from pydantic import ValidationError

from src.common.config import Config
from src.common.errors import InvalidArgument, JobNotFound, StoreUnavailable
from src.common.logger import get_logger, setup_logging
from src.common.repositories import JobRepositoryInterface, get_job_repository
from src.models.job import (
    AppliedUpdate,
    ArchivedUpdate,
    BulkArchiveRequest,
    ReadUpdate,
    SavedUpdate,
)
from src.pagination import QueryPlanner
from src.services.job_actions_service import JobActionsService

try:
    from version import __version__
    APP_VERSION = __version__
except ImportError:
    APP_VERSION = "dev"

setup_logging(Config.LOG_LEVEL, Config.LOG_FORMAT)
logger = get_logger(__name__)


def check_config() -> None:
    """
    Log the configuration summary and validate it.

    Missing settings are fatal in production and a warning elsewhere.
    """
    logger.info(Config.summary())
    try:
        Config.validate()
    except ValueError as e:
        if os.getenv("FLASK_ENV") == "production":
            raise RuntimeError(f"CRITICAL: {e}") from e
        logger.warning(f"Configuration incomplete: {e}")


check_config()

app = Flask(__name__)

# Session configuration
flask_secret_key = Config.FLASK_SECRET_KEY

if not flask_secret_key:
    if os.getenv("FLASK_ENV") == "production":
        raise RuntimeError(
            "CRITICAL: FLASK_SECRET_KEY not set. "
            "Sessions would be invalidated on every restart."
        )
    logger.warning("FLASK_SECRET_KEY not set. Generating random key (sessions will not persist between restarts)")
    flask_secret_key = os.urandom(24).hex()

app.secret_key = flask_secret_key

# Cookie security settings
is_production = os.getenv("FLASK_ENV") == "production"
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SECURE"] = is_production
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.config["PERMANENT_SESSION_LIFETIME"] = 60 * 60 * 24 * 30  # 30 days


def _get_repo() -> JobRepositoryInterface:
    """Process-wide job repository (patched in tests)."""
    return get_job_repository()


def _log():
    return get_logger(__name__, request_id=getattr(g, "request_id", None))


@app.before_request
def assign_request_id():
    g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex


@app.after_request
def echo_request_id(response):
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Error handlers
# ============================================================================

class InvalidRequestBody(InvalidArgument):
    """A mutation body failed validation."""

    def __init__(self, error: ValidationError):
        super().__init__("Invalid request body")
        self.fields = [".".join(str(part) for part in err["loc"]) or "body" for err in error.errors()]


@app.errorhandler(InvalidArgument)
def handle_invalid_argument(e: InvalidArgument):
    payload = {"error": str(e)}
    if isinstance(e, InvalidRequestBody):
        payload["fields"] = e.fields
    return jsonify(payload), 400


@app.errorhandler(JobNotFound)
def handle_job_not_found(e: JobNotFound):
    return jsonify({"error": "Job not found", "job_id": e.job_id}), 404


@app.errorhandler(StoreUnavailable)
def handle_store_unavailable(e: StoreUnavailable):
    _log().error(f"Store unavailable: {e}")
    return jsonify({"error": "Job store unavailable, try again later"}), 503


# ============================================================================
# Authentication
# ============================================================================

def login_required(f):
    """Decorator returning JSON 401 unless the session is authenticated."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get("authenticated"):
            return jsonify({"error": "Not authenticated"}), 401
        return f(*args, **kwargs)
    return decorated_function


@app.route("/api/auth", methods=["POST"])
def login():
    """
    Exchange the shared secret for an authenticated session.

    Request Body:
        secret: The dashboard AUTH_SECRET
    """
    if not Config.AUTH_SECRET:
        _log().error("AUTH_SECRET is not configured; refusing login")
        return jsonify({"error": "Authentication is not configured"}), 500

    data = request.get_json(silent=True) or {}
    secret = data.get("secret")

    if not isinstance(secret, str) or not hmac.compare_digest(secret, Config.AUTH_SECRET):
        return jsonify({"error": "Invalid secret"}), 401

    session["authenticated"] = True
    session.permanent = True
    return jsonify({"success": True, "message": "Authenticated"})


@app.route("/api/auth", methods=["DELETE"])
def logout():
    session.clear()
    return jsonify({"success": True, "message": "Logged out"})


@app.route("/api/auth/status", methods=["GET"])
def auth_status():
    return jsonify({"authenticated": bool(session.get("authenticated"))})


# ============================================================================
# Listing
# ============================================================================

def _parse_limit(raw: Optional[str]) -> int:
    """Parse the limit query param; values above MAX_PAGE_SIZE are clamped."""
    if raw is None or raw == "":
        return Config.DEFAULT_PAGE_SIZE
    try:
        limit = int(raw)
    except ValueError:
        raise InvalidArgument(f"limit must be an integer, got '{raw}'") from None
    return min(limit, Config.MAX_PAGE_SIZE)


@app.route("/api/jobs", methods=["GET"])
def list_jobs():
    """
    List jobs one page at a time.

    Query Parameters:
        cursor: Opaque token from the previous page's nextCursor
        limit: Page size (default 20, max 100)
        filter: all | browse | saved | unread | read | archived (default: all)
        sort: posted_newest | posted_oldest | company_az | company_za
              (default: posted_newest)

    Returns:
        JSON with jobs array and nextCursor (null on the last page)
    """
    limit = _parse_limit(request.args.get("limit"))
    planner = QueryPlanner(_get_repo())

    page = planner.get_page(
        filter=request.args.get("filter", "all"),
        sort=request.args.get("sort", "posted_newest"),
        cursor=request.args.get("cursor") or None,
        limit=limit,
    )
    return jsonify(page.to_dict())


@app.route("/api/jobs/<job_id>", methods=["GET"])
def get_job(job_id: str):
    """Return a single job by _id."""
    job = JobActionsService(_get_repo()).get_job(job_id)
    return jsonify(job.to_json())


# ============================================================================
# Mutations
# ============================================================================

def _request_body(model):
    """Validate the JSON body against a pydantic model."""
    data = request.get_json(silent=True)
    try:
        return model.model_validate(data if isinstance(data, dict) else {})
    except ValidationError as e:
        raise InvalidRequestBody(e) from e


@app.route("/api/jobs/<job_id>/saved", methods=["POST"])
@login_required
def update_job_saved(job_id: str):
    """Request Body: saved (bool)"""
    body = _request_body(SavedUpdate)
    result = JobActionsService(_get_repo()).set_saved(job_id, body.saved)
    return jsonify(result.to_dict())


@app.route("/api/jobs/<job_id>/archived", methods=["POST"])
@login_required
def update_job_archived(job_id: str):
    """Request Body: archived (bool)"""
    body = _request_body(ArchivedUpdate)
    result = JobActionsService(_get_repo()).set_archived(job_id, body.archived)
    return jsonify(result.to_dict())


@app.route("/api/jobs/<job_id>/read", methods=["POST"])
@login_required
def update_job_read(job_id: str):
    """Request Body: read (bool)"""
    body = _request_body(ReadUpdate)
    result = JobActionsService(_get_repo()).set_read(job_id, body.read)
    return jsonify(result.to_dict())


@app.route("/api/jobs/<job_id>/applied", methods=["POST"])
@login_required
def update_job_applied(job_id: str):
    """
    Mark a job applied or not applied.

    Request Body:
        applied: bool. True stamps appliedAt with the current time, False clears it.
    """
    body = _request_body(AppliedUpdate)
    result = JobActionsService(_get_repo()).set_applied(job_id, body.applied)

    response = result.to_dict()
    response["applied"] = body.applied
    return jsonify(response)


@app.route("/api/jobs/archive", methods=["POST"])
@login_required
def archive_jobs_bulk():
    """
    Archive every job the given filter currently lists.

    Request Body:
        filter: Listing filter (default: all)
    """
    body = _request_body(BulkArchiveRequest)
    archived_count = JobActionsService(_get_repo()).archive_matching(body.filter)

    _log().info(f"Bulk archive via API: filter={body.filter}, archived={archived_count}")
    return jsonify({"success": True, "archived_count": archived_count})


# ============================================================================
# Health
# ============================================================================

@app.route("/health", methods=["GET"])
def health_check():
    """Public health check: pings the job store."""
    try:
        healthy = _get_repo().ping()
    except ValueError as e:
        _log().error(f"Health check: repository not configured: {e}")
        healthy = False

    status_code = 200 if healthy else 503
    return jsonify({
        "status": "healthy" if healthy else "unhealthy",
        "version": APP_VERSION,
    }), status_code


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_ENV") == "development")
