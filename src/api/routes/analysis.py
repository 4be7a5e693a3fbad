"""Page analysis endpoints."""

from fastapi import APIRouter, Depends

from analyzers.models import AnalysisRequest
from api.deps import get_pipeline
from api.schemas import (
    Envelope,
    GEOAnalysisRequest,
    SEOAnalysisRequest,
    SERPCompetitionRequest,
    UrlRequest,
)
from pipeline import AnalysisPipeline

router = APIRouter(tags=["Analysis"])

# Handlers are plain `def`: the pipeline blocks on network I/O, so FastAPI
# runs them in its threadpool.


@router.post(
    "/analyze-seo",
    response_model=Envelope,
    summary="Full SEO analysis",
    description="Fetch a page once and run every analyzer against it.",
)
def analyze_seo(
    request: SEOAnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    report = pipeline.analyze(
        AnalysisRequest(
            url=request.url,
            keyword=request.keywords,
            topic=request.topic,
            caller_id=request.customer_id,
        )
    )
    return Envelope(data=report.to_dict(), message="Analysis completed")


@router.post(
    "/analyze-broken-links",
    response_model=Envelope,
    summary="Broken link audit",
)
def analyze_broken_links(
    request: UrlRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    audit = pipeline.audit_links(request.url)
    return Envelope(data=audit.to_dict(), message=_message(audit.error, "Link audit completed"))


@router.post(
    "/extract-keywords",
    response_model=Envelope,
    summary="Keyword extraction",
)
def extract_keywords(
    request: UrlRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    report = pipeline.extract_keywords(request.url)
    return Envelope(
        data=report.to_dict(),
        message=_message(report.error, "Keyword extraction completed"),
    )


@router.post(
    "/analyze-technical-seo",
    response_model=Envelope,
    summary="Technical SEO scoring",
)
def analyze_technical_seo(
    request: UrlRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    report = pipeline.analyze_technical(request.url)
    return Envelope(
        data=report.to_dict(),
        message=_message(report.error, "Technical analysis completed"),
    )


@router.post(
    "/analyze-serp-competition",
    response_model=Envelope,
    summary="Simulated SERP competition profile",
    description="Feature presence is randomly drawn; no search engine is queried.",
)
def analyze_serp_competition(
    request: SERPCompetitionRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    report = pipeline.simulate_serp(request.keyword, request.location)
    return Envelope(data=report.to_dict(), message="Simulated SERP profile generated")


@router.post(
    "/analyze-geo",
    response_model=Envelope,
    summary="GEO (AI answer engine) readiness",
)
def analyze_geo(
    request: GEOAnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> Envelope:
    report = pipeline.analyze_geo(request.url, request.topic)
    return Envelope(data=report.to_dict(), message=_message(report.error, "GEO analysis completed"))


def _message(error: str | None, done: str) -> str:
    return f"Page could not be analyzed: {error}" if error else done
