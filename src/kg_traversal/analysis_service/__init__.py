"""HTTP analysis service: auth, request dispatch and error mapping."""

from .app import create_app
from .dispatcher import AnalysisRequest, run_analysis, run_summary
from .errors import AnalysisError, AuthError, RequestValidationFailed

__all__ = [
    "create_app",
    "AnalysisRequest",
    "run_analysis",
    "run_summary",
    "AnalysisError",
    "AuthError",
    "RequestValidationFailed",
]
