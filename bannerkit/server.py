"""REST API server."""
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from bannerkit.markup.manifest import ManifestData, build_manifest
from bannerkit.schemas import (
    AssetIssueResponse,
    AssetWeightResponse,
    BatchExportRequest,
    BatchExportResponse,
    BatchItemResponse,
    BannerRequest,
    ExportRequest,
    ExportResponse,
    ManifestRequest,
    ManifestResponse,
    PreviewResponse,
    SampleRequest,
    SampleResponse,
    ValidateAssetsRequest,
    ValidateAssetsResponse,
    WeightsResponse,
    decode_images,
)
from bannerkit.services.cancellation import ExportError
from bannerkit.services.export_service import (
    ExportBundle,
    export_banner,
    export_batch,
    measure_weights,
    render_preview,
)
from bannerkit.timeline.sampler import sample_banner
from bannerkit.tools.asset_validator import collect_issues

logger = logging.getLogger(__name__)

app = FastAPI(title="Banner Animation API")


def _export_response(bundle: ExportBundle) -> ExportResponse:
    return ExportResponse(
        frame_name=bundle.frame_name,
        preset=bundle.preset.value,
        html=bundle.html,
        manifest=bundle.manifest,
        image_paths=sorted(bundle.images),
        warnings=bundle.warnings,
        export_scale=bundle.export_scale,
        total_bytes=bundle.total_bytes,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/preview", response_model=PreviewResponse)
def preview(payload: BannerRequest):
    try:
        html = render_preview(payload.banner, decode_images(payload.images))
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.exception("Preview failed")
        raise HTTPException(status_code=500, detail=f"Preview failed: {exc}")
    return PreviewResponse(html=html)


@app.post("/api/export", response_model=ExportResponse)
def export(payload: ExportRequest):
    try:
        bundle = export_banner(payload.banner, decode_images(payload.images), optimize=payload.optimize)
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.exception("Export failed")
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred: {exc}")
    return _export_response(bundle)


@app.post("/api/export/batch", response_model=BatchExportResponse)
def export_many(payload: BatchExportRequest):
    if not payload.items:
        raise HTTPException(status_code=422, detail="No banners to export.")
    try:
        images = [decode_images(item.images) for item in payload.items]
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    result = export_batch([item.banner for item in payload.items], images)
    items = []
    for outcome in result.outcomes:
        items.append(
            BatchItemResponse(
                index=outcome.index,
                frame_name=outcome.frame_name,
                ok=outcome.ok,
                error=outcome.error,
                export=_export_response(outcome.bundle) if outcome.bundle else None,
            )
        )
    return BatchExportResponse(items=items, cancelled=result.cancelled)


@app.post("/api/weights", response_model=WeightsResponse)
def weights(payload: BannerRequest):
    try:
        measured = measure_weights(payload.banner, decode_images(payload.images))
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.exception("Weight measurement failed")
        raise HTTPException(status_code=500, detail=f"Weight measurement failed: {exc}")
    return WeightsResponse(
        weights=[
            AssetWeightResponse(asset_id=w.asset_id, name=w.name, optimized=w.optimized, unoptimized=w.unoptimized)
            for w in measured
        ],
        optimized_total=sum(w.optimized for w in measured),
        unoptimized_total=sum(w.unoptimized for w in measured),
    )

@app.post("/api/sample", response_model=SampleResponse)
def sample(payload: SampleRequest):
    return SampleResponse(time=payload.time, poses=sample_banner(payload.banner, payload.time))


@app.post("/api/manifest", response_model=ManifestResponse)
def manifest(payload: ManifestRequest):
    banner = payload.banner
    return ManifestResponse(
        preset=banner.export_preset.value,
        manifest=build_manifest(banner.export_preset, ManifestData.from_banner(banner)),
    )


@app.post("/api/assets/validate", response_model=ValidateAssetsResponse)
def validate_assets(payload: ValidateAssetsRequest):
    issues = collect_issues(payload.assets, payload.max_dimension)
    return ValidateAssetsResponse(
        valid=not issues,
        issues=[AssetIssueResponse(asset_id=i.asset_id, name=i.name, error=i.error) for i in issues],
    )
