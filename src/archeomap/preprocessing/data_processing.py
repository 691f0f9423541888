"""
Data loading module for ArcheoMap.

This module reads sample datasets (GeoJSON FeatureCollections or delimited
tables) into Sample records. All absence handling happens here: missing
columns, nulls, NaN and empty strings become None, and unparseable ages are
treated as undated.
"""

import json
import logging
import os

import pandas as pd

from ..core.exceptions import DataSourceError
from ..core.types import Sample, normalize_age, normalize_text

logger = logging.getLogger(__name__)

# Accepted source names for each Sample attribute, first match wins
ID_KEYS = ("sample_id", "id", "Sample ID")
AGE_KEYS = ("average_age_calbp", "age", "age_calbp")
CULTURE_KEYS = ("culture",)
Y_HAPLOGROUP_KEYS = ("y_haplogroup", "y_hap")
MTDNA_KEYS = ("mtdna", "mt_haplogroup")
Y_HAPLOTREE_KEYS = ("y_haplotree",)
LONGITUDE_KEYS = ("longitude", "lon", "long", "Long")
LATITUDE_KEYS = ("latitude", "lat", "Lat")

_KNOWN_KEYS = set(ID_KEYS + AGE_KEYS + CULTURE_KEYS + Y_HAPLOGROUP_KEYS + MTDNA_KEYS
                  + Y_HAPLOTREE_KEYS + LONGITUDE_KEYS + LATITUDE_KEYS + ("_color",))


def _first(mapping, keys):
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _extra_properties(mapping):
    extra = {}
    for key, value in mapping.items():
        if key in _KNOWN_KEYS:
            continue
        if isinstance(value, float) and pd.isna(value):
            value = None
        extra[key] = value
    return extra


def sample_from_properties(properties, position, fallback_id=""):
    """
    Create a Sample from a flat property mapping.

    Args:
        properties (dict): source attributes
        position (tuple): (longitude, latitude)
        fallback_id (str): id used when no id column is present

    Returns:
        Sample: the normalized sample
    """
    sample_id = normalize_text(_first(properties, ID_KEYS)) or fallback_id
    return Sample(
        id=sample_id,
        position=position,
        age=normalize_age(_first(properties, AGE_KEYS)),
        culture=normalize_text(_first(properties, CULTURE_KEYS)),
        y_haplogroup=normalize_text(_first(properties, Y_HAPLOGROUP_KEYS)),
        mtdna=normalize_text(_first(properties, MTDNA_KEYS)),
        y_haplotree=normalize_text(_first(properties, Y_HAPLOTREE_KEYS)),
        properties=_extra_properties(properties),
    )


def sample_from_feature(feature, fallback_id=""):
    """
    Convert a GeoJSON Point feature to a Sample.

    Args:
        feature (dict): GeoJSON feature with Point geometry

    Returns:
        Sample: the normalized sample

    Raises:
        ValueError: if the feature has no usable point coordinates
    """
    geometry = feature.get("geometry") or {}
    coordinates = geometry.get("coordinates")
    if not coordinates or len(coordinates) < 2:
        raise ValueError("Feature has no point coordinates")
    lon, lat = float(coordinates[0]), float(coordinates[1])
    properties = feature.get("properties") or {}
    return sample_from_properties(properties, (lon, lat),
                                  fallback_id=normalize_text(feature.get("id")) or fallback_id)


def samples_from_feature_collection(collection):
    """
    Convert a GeoJSON FeatureCollection dict to Samples.

    Features without usable coordinates are skipped with a warning.
    """
    samples = []
    skipped = 0
    for idx, feature in enumerate(collection.get("features", [])):
        try:
            samples.append(sample_from_feature(feature, fallback_id=str(idx)))
        except (TypeError, ValueError):
            skipped += 1
    if skipped:
        logger.warning("Skipped %d features without valid point coordinates", skipped)
    return samples


def load_geojson(path):
    """
    Load samples from a GeoJSON file.

    Raises:
        DataSourceError: if the file is missing or is not valid GeoJSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            collection = json.load(f)
    except FileNotFoundError:
        raise DataSourceError(f"Data file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise DataSourceError(f"Could not read GeoJSON from {path}: {e}")

    if not isinstance(collection, dict) or collection.get("type") != "FeatureCollection":
        raise DataSourceError(f"{path} is not a GeoJSON FeatureCollection")

    samples = samples_from_feature_collection(collection)
    logger.info("Loaded %d samples from %s", len(samples), path)
    return samples


def samples_from_dataframe(df):
    """
    Convert a table of samples to Samples.

    Rows need numeric longitude and latitude columns; rows without them are
    skipped with a warning.
    """
    lon_col = next((c for c in LONGITUDE_KEYS if c in df.columns), None)
    lat_col = next((c for c in LATITUDE_KEYS if c in df.columns), None)
    if lon_col is None or lat_col is None:
        raise DataSourceError("Sample table needs longitude and latitude columns")

    df = df.copy()
    df[lon_col] = pd.to_numeric(df[lon_col], errors="coerce")
    df[lat_col] = pd.to_numeric(df[lat_col], errors="coerce")
    valid = df[lon_col].notna() & df[lat_col].notna()
    if (~valid).any():
        logger.warning("Skipped %d rows without valid coordinates", int((~valid).sum()))

    samples = []
    for idx, row in df[valid].iterrows():
        record = row.to_dict()
        samples.append(sample_from_properties(
            record, (record[lon_col], record[lat_col]), fallback_id=str(idx)))
    return samples


def load_samples_table(path, sep=None):
    """
    Load samples from a CSV/TSV table.

    Args:
        path (str): table path
        sep (str, optional): delimiter; inferred from the extension when None

    Raises:
        DataSourceError: if the file is missing or unreadable
    """
    if sep is None:
        sep = "\t" if os.path.splitext(path)[1].lower() in (".tsv", ".tab") else ","
    try:
        df = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False)
    except FileNotFoundError:
        raise DataSourceError(f"Data file not found: {path}")
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataSourceError(f"Could not read sample table {path}: {e}")

    samples = samples_from_dataframe(df)
    logger.info("Loaded %d samples from %s", len(samples), path)
    return samples


def load_samples(path):
    """
    Load samples from a GeoJSON or delimited table file, chosen by extension.

    Raises:
        DataSourceError: for unsupported extensions or unreadable files
    """
    ext = os.path.splitext(path)[1].lower()
    if ext in (".geojson", ".json"):
        return load_geojson(path)
    if ext in (".csv", ".tsv", ".tab", ".txt"):
        return load_samples_table(path)
    raise DataSourceError(f"Unsupported data file type: {ext}")


def samples_to_feature_collection(samples):
    """Encode samples as a GeoJSON FeatureCollection dict."""
    return {
        "type": "FeatureCollection",
        "features": [s.to_geojson() for s in samples],
    }
