import argparse
import logging
import os
import sys

from flask import Flask
from flask_cors import CORS

from archeomap import config
from archeomap.config import MapSettings
from archeomap.core.exceptions import DataSourceError
from archeomap.server.store import SampleStore

logger = logging.getLogger(__name__)


def create_app(data_path=None, samples=None, settings=None):
    """
    Create the Flask app serving one sample dataset.

    Args:
        data_path (str, optional): GeoJSON/CSV file loaded on first request
        samples (list, optional): preloaded samples, e.g. for tests
        settings (MapSettings, optional): map display settings
    """
    app = Flask(__name__)

    # Enable CORS for the API (map frontend may be served elsewhere)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    store = SampleStore(data_path=data_path, samples=samples, settings=settings)
    app.extensions["archeomap"] = store

    from archeomap.server.api.routes import api_bp
    app.register_blueprint(api_bp, url_prefix="/api")

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "data_source": store.data_source,
            "cached": store.is_cached,
        }

    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Serve archaeogenetic samples for the interactive map.")
    parser.add_argument("data_file", help="GeoJSON (.geojson/.json) or table (.csv/.tsv) of samples")
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", config.DEFAULT_PORT)),
                        help="Port to listen on (default: %(default)s)")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: %(default)s)")
    parser.add_argument("--tiles", choices=sorted(config.TILE_PRESETS), default="osm",
                        help="Tile layer preset (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging and Flask debug mode")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not os.path.isfile(args.data_file):
        logger.error("File not found: %s", args.data_file)
        return 1

    app = create_app(data_path=args.data_file, settings=MapSettings.from_preset(args.tiles))
    try:
        samples = app.extensions["archeomap"].get_samples()
    except DataSourceError as e:
        logger.error("%s", e)
        return 1

    logger.info("Serving %d samples from %s on port %d", len(samples), args.data_file, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
