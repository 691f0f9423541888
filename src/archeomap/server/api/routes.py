import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from archeomap import config
from archeomap.analysis import geometry as am_geometry
from archeomap.analysis import statistics as am_stats
from archeomap.core.exceptions import DataSourceError, RequestError
from archeomap.core.query import process_query
from archeomap.core.types import FilterRequest
from archeomap.preprocessing.data_processing import samples_to_feature_collection
from archeomap.visualization import color_system

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def get_store():
    """The SampleStore registered on the current app."""
    return current_app.extensions["archeomap"]


def read_json_body():
    """
    Decode the request body as JSON.

    An empty body decodes to None, i.e. a default request.

    Raises:
        BadRequest: if the body is not valid JSON
    """
    if not request.get_data():
        return None
    return request.get_json(force=True)


def build_config_response(store):
    """Build the payload for GET /api/config."""
    samples = store.get_samples()
    settings = store.settings

    date_stats = am_stats.calculate_date_statistics(samples)
    bounds = am_geometry.calculate_bounds(samples, settings.padding)
    center_lat, center_lon = am_geometry.calculate_center(bounds)

    return {
        "colorRamps": color_system.get_color_ramp_info(),
        "slider": config.slider_config(),
        "defaults": {
            "includeUndated": True,
            "includeNoCulture": True,
            "includeNoYHaplogroup": True,
            "includeNoMtdna": True,
            "colorRamp": config.DEFAULT_COLOR_RAMP,
            "cultureColorRamp": config.DEFAULT_COLOR_RAMP,
            "yHaplogroupColorRamp": config.DEFAULT_COLOR_RAMP,
            "mtdnaColorRamp": config.DEFAULT_COLOR_RAMP,
            "yHaplotreeColorRamp": config.DEFAULT_COLOR_RAMP,
            "pointColor": settings.point_color,
            "pointRadius": settings.point_radius,
        },
        "map": {
            "center": [center_lat, center_lon],
            "zoom": settings.initial_zoom,
            "estimatedZoom": am_geometry.estimate_zoom_level(bounds),
            "tileUrl": settings.tile_url,
            "tileAttribution": settings.tile_attribution,
        },
        "dateStatistics": date_stats.to_dict(),
        "allCultures": am_stats.extract_cultures(samples),
        "allYHaplogroups": am_stats.extract_y_haplogroups(samples),
        "allMtdna": am_stats.extract_mtdna(samples),
    }


@api_bp.get("/config")
def get_config():
    try:
        return jsonify(build_config_response(get_store()))
    except DataSourceError as e:
        return jsonify({"error": True, "message": str(e)}), 503


@api_bp.get("/color-ramps")
def get_color_ramps():
    return jsonify(color_system.get_color_ramp_info())


@api_bp.post("/query")
def query():
    """Filter, color and describe the samples.

    Body JSON (all optional):
    {
      dateMin, dateMax: number,
      includeUndated, includeNoCulture, includeNoYHaplogroup, includeNoMtdna: bool,
      selectedCultures, selectedYHaplogroups, selectedMtdna, yHaplotreeTerms: string[],
      yHaplogroupSearchText, mtdnaSearchText: string,
      colorBy: 'age'|'culture'|'y_haplogroup'|'mtdna'|'y_haplotree',
      colorRamp, cultureColorRamp, yHaplogroupColorRamp, mtdnaColorRamp, yHaplotreeColorRamp: string
    }
    """
    try:
        filter_request = FilterRequest.from_payload(read_json_body())
    except (BadRequest, RequestError) as e:
        return jsonify({"error": True, "message": str(e)}), 400

    store = get_store()
    try:
        samples = store.get_samples()
        response = process_query(samples, filter_request, default_color=store.settings.point_color)
    except DataSourceError as e:
        return jsonify({"error": True, "message": str(e)}), 503
    except Exception as e:
        logger.exception("Error processing query")
        return jsonify({"error": True, "message": str(e)}), 500

    return jsonify(response.to_dict())


@api_bp.get("/samples")
def list_samples():
    try:
        samples = get_store().get_samples()
    except DataSourceError as e:
        return jsonify({"error": True, "message": str(e)}), 503
    return jsonify(samples_to_feature_collection(samples))
