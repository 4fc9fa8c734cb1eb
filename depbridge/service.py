"""Request/response boundary around ``build_graph``.

``analyze`` never raises: expected failures come back as an
``AnalysisResponse`` with ``success=False`` and an HTTP-style status code.
"""

import logging
from typing import Optional

from .builder import build_graph
from .config import DEFAULT_CONFIG, BridgeConfig
from .errors import SourceNotFoundError, UnsupportedSourceError
from .exporters import to_bridge_data
from .models import AnalysisRequest, AnalysisResponse, file_extension

logger = logging.getLogger(__name__)


def analyze(request: AnalysisRequest, config: Optional[BridgeConfig] = None,
            analyzed_at: Optional[str] = None) -> AnalysisResponse:
    config = config or DEFAULT_CONFIG
    try:
        if request.source_path not in request.corpus:
            raise SourceNotFoundError(request.source_path)
        if not config.is_analyzable(request.source_path):
            raise UnsupportedSourceError(request.source_path, file_extension(request.source_path))
        graph = build_graph(request.source_path, request.corpus, config)
    except SourceNotFoundError as e:
        logger.info("%s", e)
        return AnalysisResponse(success=False, error=str(e), status=404)
    except UnsupportedSourceError as e:
        logger.info("%s", e)
        return AnalysisResponse(success=False, error=str(e), status=400)
    except Exception:
        logger.exception("Bridge analysis failed for %s", request.source_path)
        return AnalysisResponse(success=False, error="Failed to analyze file dependencies", status=500)

    return AnalysisResponse(success=True, data=to_bridge_data(graph, analyzed_at=analyzed_at))
