"""API routes for the multi-AI lead pipeline."""

import logging
import traceback
from functools import lru_cache

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from repairer_leads.config import ProviderKeys
from repairer_leads.models.database import init_db
from repairer_leads.pipeline import PIPELINE_STEPS, Pipeline
from repairer_leads.storage import RecordStore, SQLRepairerStore, persist_candidates

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


class PipelineRequest(BaseModel):
    """Request body for a pipeline run."""

    model_config = ConfigDict(populate_by_name=True)

    search_term: str = Field(alias="searchTerm", min_length=1)
    location: str = Field(min_length=1)
    test_mode: bool = Field(default=False, alias="testMode")


def get_pipeline() -> Pipeline:
    """Build a pipeline from the environment's provider keys."""
    return Pipeline(ProviderKeys.from_settings())


@lru_cache(maxsize=1)
def get_store() -> RecordStore:
    return SQLRepairerStore(init_db())


@router.options("/multi-ai-pipeline")
async def pipeline_preflight():
    """CORS preflight."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/multi-ai-pipeline")
async def run_pipeline(
    request: PipelineRequest,
    pipeline: Pipeline = Depends(get_pipeline),
    store: RecordStore = Depends(get_store),
):
    """Run the pipeline and persist its results unless in test mode."""
    logger.info(f"Multi-AI pipeline request: '{request.search_term}' in '{request.location}'")

    try:
        results = await pipeline.run(request.search_term, request.location)

        if not request.test_mode and results:
            persist_candidates(store, results)

        return JSONResponse(
            content={
                "success": True,
                "results": [r.model_dump(mode="json") for r in results],
                "metadata": {
                    "pipeline_steps": PIPELINE_STEPS,
                    "total_results": len(results),
                    "test_mode": request.test_mode,
                    "ai_apis_used": pipeline.ai_apis_used(),
                },
            },
            headers=CORS_HEADERS,
        )

    except Exception as e:
        logger.error(f"Pipeline failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(e),
                "details": traceback.format_exc(),
            },
            headers=CORS_HEADERS,
        )
